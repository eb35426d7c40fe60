"""Contract payload exports."""

from .metadata_models import (
    Authentication,
    Extension,
    MediaFile,
    Metadata,
    PayloadShapeError,
    Trait,
    ViewerInfo,
    unwrap_answer,
)
from .nft_messages import (
    MintNft,
    NftInfo,
    PrivateMetadata,
    ProviderMetadata,
    RegisterMetadataProvider,
    SetMetadata,
    SetViewingKey,
    decode_nft_info,
    decode_private_metadata,
    decode_provider_metadata,
)
from .provider_messages import (
    ChangeAdmin,
    CreateViewingKey,
    ProviderInstantiate,
    ProviderNftInfo,
    ProviderPrivateMetadata,
    ProviderSetMetadata,
    ProviderSetViewingKey,
    decode_provider_nft_info,
    decode_provider_private_metadata,
)
from .tagged_variants import ContractPayload, TaggedVariant, payload_tag, render_payload

__all__ = [
    "Authentication",
    "Extension",
    "MediaFile",
    "Metadata",
    "PayloadShapeError",
    "Trait",
    "ViewerInfo",
    "unwrap_answer",
    "MintNft",
    "NftInfo",
    "PrivateMetadata",
    "ProviderMetadata",
    "RegisterMetadataProvider",
    "SetMetadata",
    "SetViewingKey",
    "decode_nft_info",
    "decode_private_metadata",
    "decode_provider_metadata",
    "ChangeAdmin",
    "CreateViewingKey",
    "ProviderInstantiate",
    "ProviderNftInfo",
    "ProviderPrivateMetadata",
    "ProviderSetMetadata",
    "ProviderSetViewingKey",
    "decode_provider_nft_info",
    "decode_provider_private_metadata",
    "ContractPayload",
    "TaggedVariant",
    "payload_tag",
    "render_payload",
]
