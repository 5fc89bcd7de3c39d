"""Input and projection models shared by the detector and its repositories."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator


class Platform(str, Enum):
    """Social platforms a store link can point to."""

    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TIKTOK = "tiktok"
    WEBSITE = "website"
    WHATSAPP = "whatsapp"


class StoreStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class CandidateLink(BaseModel):
    """A link submitted with a store (or attached to an existing one)."""

    model_config = {"frozen": True}

    platform: Platform = Field(..., description="Platform the link belongs to")
    url: str = Field("", description="Link as entered by the user")
    handle: Optional[str] = Field(None, description="Explicit handle, when provided")

    @field_validator("platform", mode="before")
    @classmethod
    def lower_platform(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v):
        return (v or "").strip()

    @field_validator("handle", mode="before")
    @classmethod
    def blank_handle_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


class ExistingStoreRecord(BaseModel):
    """Read-only projection of a store already in the catalog."""

    model_config = {"frozen": True}

    id: Union[int, str]
    name: str
    slug: str = ""
    status: StoreStatus = StoreStatus.ACTIVE
    is_verified: bool = False
    avg_rating: Optional[float] = None
    reviews_count: int = 0
    links: Tuple[CandidateLink, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.status == StoreStatus.ACTIVE


class MatchedStore(BaseModel):
    """Public summary of the store a submission collided with."""

    id: Union[int, str]
    name: str
    slug: str
    is_verified: bool = False
    avg_rating: Optional[float] = None
    reviews_count: int = 0

    @classmethod
    def from_record(cls, record: ExistingStoreRecord) -> "MatchedStore":
        return cls(
            id=record.id,
            name=record.name,
            slug=record.slug,
            is_verified=record.is_verified,
            avg_rating=record.avg_rating,
            reviews_count=record.reviews_count,
        )
