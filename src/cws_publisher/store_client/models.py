"""Typed, immutable records exchanged with the Chrome Web Store API.

Request values know how to render themselves to the camelCase wire format
(``to_payload``) and response values are rebuilt from parsed JSON on every
call (``from_api``).  Enum-typed fields received from the server fall back to
the raw string when the value is not one this client knows about.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, TypeVar

from cws_publisher.store_client.errors import ValidationError

_E = TypeVar("_E", bound=Enum)


class ItemState(str, Enum):
    ITEM_STATE_UNSPECIFIED = "ITEM_STATE_UNSPECIFIED"
    PENDING_REVIEW = "PENDING_REVIEW"
    STAGED = "STAGED"
    PUBLISHED = "PUBLISHED"
    PUBLISHED_TO_TESTERS = "PUBLISHED_TO_TESTERS"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class UploadState(str, Enum):
    UPLOAD_STATE_UNSPECIFIED = "UPLOAD_STATE_UNSPECIFIED"
    SUCCEEDED = "SUCCEEDED"
    IN_PROGRESS = "IN_PROGRESS"
    FAILED = "FAILED"
    NOT_FOUND = "NOT_FOUND"


class PublishType(str, Enum):
    PUBLISH_TYPE_UNSPECIFIED = "PUBLISH_TYPE_UNSPECIFIED"
    DEFAULT_PUBLISH = "DEFAULT_PUBLISH"
    STAGED_PUBLISH = "STAGED_PUBLISH"

    @classmethod
    def from_option(cls, value: str | None) -> "PublishType":
        """Map the CLI spelling (``default`` / ``staged``) to the wire enum."""
        normalized = (value or "default").strip().lower()
        if normalized == "default":
            return cls.DEFAULT_PUBLISH
        if normalized == "staged":
            return cls.STAGED_PUBLISH
        raise ValidationError(
            f"Unsupported publish type: {value}. Expected 'default' or 'staged'."
        )


def _coerce_enum(enum_cls: type[_E], value: Any) -> _E | str | None:
    """Return the enum member for *value*, the raw string if unknown, or None."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def _enum_value(value: Enum | str | None) -> str | None:
    if isinstance(value, Enum):
        return value.value
    return value


# --------------------------------------------------------------------------- #
# Credentials & tokens                                                        #
# --------------------------------------------------------------------------- #
_CREDENTIAL_KEYS: tuple[tuple[str, str], ...] = (
    ("client_id", "clientId"),
    ("client_secret", "clientSecret"),
    ("refresh_token", "refreshToken"),
    ("publisher_id", "publisherId"),
)


@dataclass(frozen=True, slots=True)
class Credentials:
    """OAuth client + publisher identity, fixed for a client's lifetime."""

    client_id: str
    client_secret: str = field(repr=False)
    refresh_token: str = field(repr=False)
    publisher_id: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Credentials":
        """Build from the on-disk camelCase layout (snake_case also accepted).

        Raises
        ------
        ValidationError
            If any of the four fields is missing or blank.
        """
        values: dict[str, str] = {}
        missing: list[str] = []
        for attr, wire in _CREDENTIAL_KEYS:
            raw = data.get(wire, data.get(attr))
            text = str(raw).strip() if raw is not None else ""
            if not text:
                missing.append(wire)
            values[attr] = text
        if missing:
            raise ValidationError(
                f"Missing required config fields: {', '.join(missing)}"
            )
        return cls(**values)

    def to_mapping(self) -> dict[str, str]:
        """Return the on-disk camelCase layout.  Contains secrets: never log."""
        return {wire: getattr(self, attr) for attr, wire in _CREDENTIAL_KEYS}


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Snapshot of an OAuth access token; replaced wholesale on refresh."""

    token: str = field(repr=False)
    expires_at: float
    obtained_at: float

    @property
    def ttl(self) -> float:
        """Seconds between *obtained_at* and *expires_at*."""
        return self.expires_at - self.obtained_at

    def is_valid(self, now: float, margin: float = 0.0) -> bool:
        """Return *True* while *now* is before ``expires_at - margin``."""
        return bool(self.token) and now < (self.expires_at - margin)


# --------------------------------------------------------------------------- #
# Requests                                                                    #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class DeployInfo:
    deploy_percentage: int

    def __post_init__(self) -> None:
        value = self.deploy_percentage
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Deploy percentage must be an integer")
        if not 0 <= value <= 100:
            raise ValidationError(
                "Deploy percentage must be a number between 0 and 100"
            )

    def to_payload(self) -> dict[str, int]:
        return {"deployPercentage": self.deploy_percentage}


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Body of the ``:publish`` call."""

    skip_review: bool | None = None
    publish_type: PublishType = PublishType.DEFAULT_PUBLISH
    deploy_infos: tuple[DeployInfo, ...] | None = None

    @classmethod
    def for_rollout(
        cls,
        *,
        skip_review: bool | None = None,
        publish_type: PublishType = PublishType.DEFAULT_PUBLISH,
        deploy_percentage: int = 100,
    ) -> "PublishRequest":
        """Build a request, adding ``deployInfos`` only for partial rollouts."""
        info = DeployInfo(deploy_percentage)
        return cls(
            skip_review=skip_review,
            publish_type=publish_type,
            deploy_infos=(info,) if deploy_percentage < 100 else None,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"publishType": _enum_value(self.publish_type)}
        if self.skip_review is not None:
            payload["skipReview"] = self.skip_review
        if self.deploy_infos:
            payload["deployInfos"] = [info.to_payload() for info in self.deploy_infos]
        return payload


# --------------------------------------------------------------------------- #
# Responses                                                                   #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class DistributionChannel:
    crx_version: str | None = None
    deploy_percentage: int | None = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "DistributionChannel":
        pct = data.get("deployPercentage")
        return cls(
            crx_version=data.get("crxVersion"),
            deploy_percentage=int(pct) if pct is not None else None,
        )


@dataclass(frozen=True, slots=True)
class RevisionStatus:
    state: ItemState | str | None = None
    distribution_channels: tuple[DistributionChannel, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any] | None) -> "RevisionStatus | None":
        if not data:
            return None
        channels = data.get("distributionChannels") or []
        return cls(
            state=_coerce_enum(ItemState, data.get("state")),
            distribution_channels=tuple(
                DistributionChannel.from_api(ch) for ch in channels
            ),
        )


@dataclass(frozen=True, slots=True)
class ItemStatusSnapshot:
    """Result of ``:fetchStatus``; rebuilt from scratch on every fetch."""

    item_id: str | None = None
    public_key: str | None = None
    published_revision: RevisionStatus | None = None
    submitted_revision: RevisionStatus | None = None
    last_async_upload_state: UploadState | str | None = None
    warned: bool = False
    taken_down: bool = False
    name: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ItemStatusSnapshot":
        return cls(
            item_id=data.get("itemId"),
            public_key=data.get("publicKey"),
            published_revision=RevisionStatus.from_api(
                data.get("publishedItemRevisionStatus")
            ),
            submitted_revision=RevisionStatus.from_api(
                data.get("submittedItemRevisionStatus")
            ),
            last_async_upload_state=_coerce_enum(
                UploadState, data.get("lastAsyncUploadState")
            ),
            warned=bool(data.get("warned", False)),
            taken_down=bool(data.get("takenDown", False)),
            name=data.get("name"),
            raw=dict(data),
        )


@dataclass(frozen=True, slots=True)
class UploadResponse:
    crx_version: str | None = None
    upload_state: UploadState | str | None = None
    item_id: str | None = None
    name: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def in_progress(self) -> bool:
        return self.upload_state == UploadState.IN_PROGRESS

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "UploadResponse":
        return cls(
            crx_version=data.get("crxVersion"),
            upload_state=_coerce_enum(UploadState, data.get("uploadState")),
            item_id=data.get("itemId"),
            name=data.get("name"),
            raw=dict(data),
        )


@dataclass(frozen=True, slots=True)
class PublishResponse:
    state: ItemState | str | None = None
    item_id: str | None = None
    name: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "PublishResponse":
        return cls(
            state=_coerce_enum(ItemState, data.get("state")),
            item_id=data.get("itemId"),
            name=data.get("name"),
            raw=dict(data),
        )
