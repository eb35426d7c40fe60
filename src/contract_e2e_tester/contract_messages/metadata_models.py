"""SNIP-721 metadata shapes shared by NFT and provider payloads."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any


class PayloadShapeError(Exception):
    """Raised when a payload does not match the expected contract shape."""


@dataclass(frozen=True)
class Trait:
    """One attribute of a token."""

    value: str
    display_type: str | None = None
    trait_type: str | None = None
    max_value: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact(
            {
                "display_type": self.display_type,
                "trait_type": self.trait_type,
                "value": self.value,
                "max_value": self.max_value,
            }
        )

    @staticmethod
    def from_payload(payload: Any) -> Trait:
        section = _require_mapping(payload, "trait")
        return Trait(
            value=_require_string(section.get("value"), "trait.value"),
            display_type=_optional_string(section.get("display_type"), "trait.display_type"),
            trait_type=_optional_string(section.get("trait_type"), "trait.trait_type"),
            max_value=_optional_string(section.get("max_value"), "trait.max_value"),
        )


@dataclass(frozen=True)
class Authentication:
    """Credentials needed to access a media file."""

    key: str | None = None
    user: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact({"key": self.key, "user": self.user})

    @staticmethod
    def from_payload(payload: Any) -> Authentication:
        section = _require_mapping(payload, "authentication")
        return Authentication(
            key=_optional_string(section.get("key"), "authentication.key"),
            user=_optional_string(section.get("user"), "authentication.user"),
        )


@dataclass(frozen=True)
class MediaFile:
    """Media attached to a token."""

    url: str
    file_type: str | None = None
    extension: str | None = None
    authentication: Authentication | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact(
            {
                "file_type": self.file_type,
                "extension": self.extension,
                "authentication": (
                    self.authentication.to_payload() if self.authentication else None
                ),
                "url": self.url,
            }
        )

    @staticmethod
    def from_payload(payload: Any) -> MediaFile:
        section = _require_mapping(payload, "media")
        authentication = section.get("authentication")
        return MediaFile(
            url=_require_string(section.get("url"), "media.url"),
            file_type=_optional_string(section.get("file_type"), "media.file_type"),
            extension=_optional_string(section.get("extension"), "media.extension"),
            authentication=(
                Authentication.from_payload(authentication) if authentication is not None else None
            ),
        )


@dataclass(frozen=True)
class Extension:  # pylint: disable=too-many-instance-attributes
    """On-chain metadata extension."""

    name: str | None = None
    description: str | None = None
    image: str | None = None
    image_data: str | None = None
    external_url: str | None = None
    attributes: tuple[Trait, ...] | None = None
    media: tuple[MediaFile, ...] | None = None
    protected_attributes: tuple[str, ...] | None = None

    def to_payload(self) -> dict[str, Any]:
        return _compact(
            {
                "image": self.image,
                "image_data": self.image_data,
                "external_url": self.external_url,
                "description": self.description,
                "name": self.name,
                "attributes": (
                    [trait.to_payload() for trait in self.attributes]
                    if self.attributes is not None
                    else None
                ),
                "media": (
                    [media.to_payload() for media in self.media] if self.media is not None else None
                ),
                "protected_attributes": (
                    list(self.protected_attributes)
                    if self.protected_attributes is not None
                    else None
                ),
            }
        )

    @staticmethod
    def from_payload(payload: Any) -> Extension:
        section = _require_mapping(payload, "extension")
        attributes = section.get("attributes")
        media = section.get("media")
        protected = section.get("protected_attributes")
        return Extension(
            name=_optional_string(section.get("name"), "extension.name"),
            description=_optional_string(section.get("description"), "extension.description"),
            image=_optional_string(section.get("image"), "extension.image"),
            image_data=_optional_string(section.get("image_data"), "extension.image_data"),
            external_url=_optional_string(section.get("external_url"), "extension.external_url"),
            attributes=(
                tuple(
                    Trait.from_payload(item)
                    for item in _require_sequence(attributes, "extension.attributes")
                )
                if attributes is not None
                else None
            ),
            media=(
                tuple(
                    MediaFile.from_payload(item)
                    for item in _require_sequence(media, "extension.media")
                )
                if media is not None
                else None
            ),
            protected_attributes=(
                tuple(
                    _require_string(item, "extension.protected_attributes")
                    for item in _require_sequence(protected, "extension.protected_attributes")
                )
                if protected is not None
                else None
            ),
        )


@dataclass(frozen=True)
class Metadata:
    """Token metadata: either an off-chain `token_uri` or an on-chain `extension`."""

    token_uri: str | None = None
    extension: Extension | None = None

    def __post_init__(self) -> None:
        if self.token_uri is not None and self.extension is not None:
            raise PayloadShapeError("Metadata can not have BOTH token_uri AND extension")

    def to_payload(self) -> dict[str, Any]:
        return _compact(
            {
                "token_uri": self.token_uri,
                "extension": self.extension.to_payload() if self.extension is not None else None,
            }
        )

    @staticmethod
    def from_payload(payload: Any) -> Metadata:
        section = _require_mapping(payload, "metadata")
        extension = section.get("extension")
        return Metadata(
            token_uri=_optional_string(section.get("token_uri"), "metadata.token_uri"),
            extension=Extension.from_payload(extension) if extension is not None else None,
        )


@dataclass(frozen=True)
class ViewerInfo:
    """Address and viewing key used to authenticate private queries."""

    address: str
    viewing_key: str

    def to_payload(self) -> dict[str, Any]:
        return {"address": self.address, "viewing_key": self.viewing_key}


def unwrap_answer(response: Any, tag: str) -> Mapping[str, Any]:
    """Return the body of a `{tag: {...}}` contract answer."""
    section = _require_mapping(response, "answer")
    if tag not in section:
        raise PayloadShapeError(f"Expected '{tag}' answer, got keys: {sorted(section)}")
    return _require_mapping(section[tag], tag)


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _require_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise PayloadShapeError(f"{field_name} must be an object.")
    return value


def _require_sequence(value: Any, field_name: str) -> Sequence[Any]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise PayloadShapeError(f"{field_name} must be an array.")
    return value


def _require_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise PayloadShapeError(f"{field_name} must be a string.")
    return value


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    return _require_string(value, field_name)
