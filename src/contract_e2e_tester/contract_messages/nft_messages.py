"""Execute and query variants of the SNIP-721 NFT contract."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .metadata_models import Metadata, PayloadShapeError, ViewerInfo, unwrap_answer
from .tagged_variants import TaggedVariant


@dataclass(frozen=True)
class MintNft(TaggedVariant):
    """Mint `token_id` to `owner`."""

    tag: ClassVar[str] = "mint_nft"

    token_id: str
    owner: str
    public_metadata: Metadata | None = None
    private_metadata: Metadata | None = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"token_id": self.token_id, "owner": self.owner}
        if self.public_metadata is not None:
            body["public_metadata"] = self.public_metadata.to_payload()
        if self.private_metadata is not None:
            body["private_metadata"] = self.private_metadata.to_payload()
        return body


@dataclass(frozen=True)
class SetMetadata(TaggedVariant):
    """Replace the public and/or private metadata of `token_id`."""

    tag: ClassVar[str] = "set_metadata"

    token_id: str
    public_metadata: Metadata | None = None
    private_metadata: Metadata | None = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"token_id": self.token_id}
        if self.public_metadata is not None:
            body["public_metadata"] = self.public_metadata.to_payload()
        if self.private_metadata is not None:
            body["private_metadata"] = self.private_metadata.to_payload()
        return body


@dataclass(frozen=True)
class SetViewingKey(TaggedVariant):
    tag: ClassVar[str] = "set_viewing_key"

    key: str

    def body(self) -> dict[str, Any]:
        return {"key": self.key}


@dataclass(frozen=True)
class RegisterMetadataProvider(TaggedVariant):
    """Register a metadata-provider contract with the NFT contract."""

    tag: ClassVar[str] = "register_metadata_provider"

    address: str
    code_hash: str

    def body(self) -> dict[str, Any]:
        return {"address": self.address, "code_hash": self.code_hash}


@dataclass(frozen=True)
class NftInfo(TaggedVariant):
    tag: ClassVar[str] = "nft_info"

    token_id: str

    def body(self) -> dict[str, Any]:
        return {"token_id": self.token_id}


@dataclass(frozen=True)
class PrivateMetadata(TaggedVariant):
    tag: ClassVar[str] = "private_metadata"

    token_id: str
    viewer: ViewerInfo | None = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"token_id": self.token_id}
        if self.viewer is not None:
            body["viewer"] = self.viewer.to_payload()
        return body


@dataclass(frozen=True)
class ProviderMetadata(TaggedVariant):
    """Batch query of the metadata every registered provider holds for `token_id`."""

    tag: ClassVar[str] = "provider_metadata"

    token_id: str
    viewer: ViewerInfo | None = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"token_id": self.token_id}
        if self.viewer is not None:
            body["viewer"] = self.viewer.to_payload()
        return body


def decode_nft_info(response: Any) -> Metadata:
    return Metadata.from_payload(unwrap_answer(response, NftInfo.tag))


def decode_private_metadata(response: Any) -> Metadata:
    return Metadata.from_payload(unwrap_answer(response, PrivateMetadata.tag))


def decode_provider_metadata(response: Any) -> tuple[Metadata, ...]:
    """Decode `{"provider_metadata": {"metadata": [...]}}` preserving registration order."""
    body = unwrap_answer(response, ProviderMetadata.tag)
    entries = body.get("metadata")
    if not isinstance(entries, list):
        raise PayloadShapeError("provider_metadata.metadata must be an array.")
    return tuple(Metadata.from_payload(entry) for entry in entries)
