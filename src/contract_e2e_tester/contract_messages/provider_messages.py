"""Init, execute and query variants of the metadata-provider contract."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .metadata_models import Metadata, ViewerInfo, unwrap_answer
from .tagged_variants import TaggedVariant


@dataclass(frozen=True)
class ProviderInstantiate:
    """Init payload binding a provider to the NFT contract it serves."""

    token_address: str
    token_code_hash: str
    name: str = "test_NFT"
    symbol: str = "token_symbol"
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            **dict(self.extra),
            "name": self.name,
            "symbol": self.symbol,
            "token_address": self.token_address,
            "token_code_hash": self.token_code_hash,
        }

    @staticmethod
    def from_settings(
        init_msg: Mapping[str, Any], *, token_address: str, token_code_hash: str
    ) -> ProviderInstantiate:
        extra = {key: value for key, value in init_msg.items() if key not in {"name", "symbol"}}
        return ProviderInstantiate(
            token_address=token_address,
            token_code_hash=token_code_hash,
            name=str(init_msg.get("name", "test_NFT")),
            symbol=str(init_msg.get("symbol", "token_symbol")),
            extra=extra,
        )


@dataclass(frozen=True)
class ProviderSetMetadata(TaggedVariant):
    """Store metadata for the token at index `idx`."""

    tag: ClassVar[str] = "set_metadata"

    token_id: str
    idx: int
    public_metadata: Metadata | None = None
    private_metadata: Metadata | None = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"token_id": self.token_id, "idx": self.idx}
        if self.public_metadata is not None:
            body["public_metadata"] = self.public_metadata.to_payload()
        if self.private_metadata is not None:
            body["private_metadata"] = self.private_metadata.to_payload()
        return body


@dataclass(frozen=True)
class CreateViewingKey(TaggedVariant):
    tag: ClassVar[str] = "create_viewing_key"

    entropy: str

    def body(self) -> dict[str, Any]:
        return {"entropy": self.entropy}


@dataclass(frozen=True)
class ProviderSetViewingKey(TaggedVariant):
    tag: ClassVar[str] = "set_viewing_key"

    key: str

    def body(self) -> dict[str, Any]:
        return {"key": self.key}


@dataclass(frozen=True)
class ChangeAdmin(TaggedVariant):
    """Admin-only: hand the provider over to `address`."""

    tag: ClassVar[str] = "change_admin"

    address: str

    def body(self) -> dict[str, Any]:
        return {"address": self.address}


@dataclass(frozen=True)
class ProviderNftInfo(TaggedVariant):
    tag: ClassVar[str] = "nft_info"

    token_idx: int

    def body(self) -> dict[str, Any]:
        return {"token_idx": self.token_idx}


@dataclass(frozen=True)
class ProviderPrivateMetadata(TaggedVariant):
    tag: ClassVar[str] = "private_metadata"

    token_id: str
    viewer: ViewerInfo | None = None

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"token_id": self.token_id}
        if self.viewer is not None:
            body["viewer"] = self.viewer.to_payload()
        return body


def decode_provider_nft_info(response: Any) -> Metadata:
    return Metadata.from_payload(unwrap_answer(response, ProviderNftInfo.tag))


def decode_provider_private_metadata(response: Any) -> Metadata:
    return Metadata.from_payload(unwrap_answer(response, ProviderPrivateMetadata.tag))
