"""Base type for externally tagged contract message variants."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from .metadata_models import PayloadShapeError


class TaggedVariant:
    """Contract entry point rendered as `{tag: body}`."""

    tag: ClassVar[str]

    def body(self) -> dict[str, Any]:
        return {}

    def to_payload(self) -> dict[str, Any]:
        return {self.tag: self.body()}


ContractPayload = TaggedVariant | Mapping[str, Any]


def render_payload(message: ContractPayload) -> dict[str, Any]:
    """Render a variant, or check that a raw mapping names exactly one entry point."""
    if isinstance(message, TaggedVariant):
        return message.to_payload()
    if not isinstance(message, Mapping) or len(message) != 1:
        raise PayloadShapeError("Contract payload must be an object with exactly one entry point.")
    tag, body = next(iter(message.items()))
    if not isinstance(tag, str) or not isinstance(body, Mapping):
        raise PayloadShapeError(f"Contract payload entry point '{tag}' must map to an object.")
    return {tag: dict(body)}


def payload_tag(message: ContractPayload) -> str:
    return next(iter(render_payload(message)))
