from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


# =====================================================
# CLOSED VOCABULARIES
# =====================================================

class ProductCategory(str, Enum):
    TOPS = "tops"
    BOTTOMS = "bottoms"
    ONE_PIECES = "one-pieces"


# Display labels used by every report that groups by category
CATEGORY_LABELS: Dict[ProductCategory, str] = {
    ProductCategory.TOPS: "Tops",
    ProductCategory.BOTTOMS: "Bottoms",
    ProductCategory.ONE_PIECES: "One-pieces",
}


class DropOffStage(str, Enum):
    NONE = "none"
    STARTED = "started"
    PHOTO_UPLOAD = "photo_upload"
    AVATAR_GENERATION = "avatar_generation"
    COMPLETED = "completed"


class EventType(str, Enum):
    ONBOARDING_STARTED = "onboarding_started"
    PHOTO_UPLOADED = "photo_uploaded"
    AVATAR_CREATED = "avatar_created"
    TRYON_COMPLETED = "tryon_completed"
    PURCHASE = "purchase"


# =====================================================
# QUERY VALUE
# =====================================================

@dataclass(frozen=True)
class DateRange:
    """
    Inclusive reporting window.

    Both bounds are optional ``YYYY-MM-DD`` strings; a missing
    bound means the window is open on that side.
    """
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def is_bounded(self) -> bool:
        return bool(self.start_date and self.end_date)


# =====================================================
# RECORDS (read-only, validated at load time)
# =====================================================

def _flag(raw: Dict[str, Any], key: str) -> bool:
    value = raw[key]
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a JSON boolean, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Shopper:
    id: str
    gender: str
    height_cm: float
    age: int
    country: str
    created_at: str
    completed_onboarding: bool
    drop_off_stage: DropOffStage

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Shopper":
        return cls(
            id=str(raw["id"]),
            gender=str(raw["gender"]),
            height_cm=float(raw["heightCm"]),
            age=int(raw["age"]),
            country=str(raw["country"]),
            created_at=str(raw["createdAt"]),
            completed_onboarding=_flag(raw, "completedOnboarding"),
            drop_off_stage=DropOffStage(raw.get("dropOffStage", "none")),
        )


@dataclass(frozen=True)
class Avatar:
    id: str
    shopper_id: str
    created_at: str
    generation_time_ms: float
    success: bool
    error_message: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Avatar":
        return cls(
            id=str(raw["id"]),
            shopper_id=str(raw["shopperId"]),
            created_at=str(raw["createdAt"]),
            generation_time_ms=float(raw["generationTimeMs"]),
            success=_flag(raw, "success"),
            error_message=raw.get("errorMessage"),
        )


@dataclass(frozen=True)
class Product:
    id: str
    sku: str
    name: str
    category: ProductCategory
    brand: str
    enabled: bool
    available_sizes: Tuple[str, ...] = ()
    image_url: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Product":
        return cls(
            id=str(raw["id"]),
            sku=str(raw["sku"]),
            name=str(raw["name"]),
            category=ProductCategory(raw["category"]),
            brand=str(raw["brand"]),
            enabled=_flag(raw, "enabled"),
            available_sizes=tuple(str(s) for s in raw.get("availableSizes", [])),
            image_url=raw.get("imageUrl"),
        )


@dataclass(frozen=True)
class TryOn:
    id: str
    avatar_id: str
    product_id: str
    created_at: str
    generation_time_ms: float
    success: bool
    angles_generated: int = 0
    error_message: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TryOn":
        return cls(
            id=str(raw["id"]),
            avatar_id=str(raw["avatarId"]),
            product_id=str(raw["productId"]),
            created_at=str(raw["createdAt"]),
            generation_time_ms=float(raw["generationTimeMs"]),
            success=_flag(raw, "success"),
            angles_generated=int(raw.get("anglesGenerated", 0)),
            error_message=raw.get("errorMessage"),
        )


@dataclass(frozen=True)
class SizeRecommendation:
    id: str
    shopper_id: str
    product_id: str
    recommended_size: str
    created_at: str

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SizeRecommendation":
        return cls(
            id=str(raw["id"]),
            shopper_id=str(raw["shopperId"]),
            product_id=str(raw["productId"]),
            recommended_size=str(raw["recommendedSize"]),
            created_at=str(raw["createdAt"]),
        )


@dataclass(frozen=True)
class Event:
    id: str
    shopper_id: str
    type: EventType
    created_at: str
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Event":
        return cls(
            id=str(raw["id"]),
            shopper_id=str(raw["shopperId"]),
            type=EventType(raw["type"]),
            created_at=str(raw["createdAt"]),
            metadata=dict(raw.get("metadata") or {}),
        )


__all__ = [
    "ProductCategory",
    "CATEGORY_LABELS",
    "DropOffStage",
    "EventType",
    "DateRange",
    "Shopper",
    "Avatar",
    "Product",
    "TryOn",
    "SizeRecommendation",
    "Event",
]
