"""Document models for the ODM demo.

pydantic does the client-side validation and defaults; documents are stored
with camelCase keys (``createdAt``, ``orderNumber``) as the other demos do.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from bson import ObjectId
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    computed_field,
    field_validator,
)

from mongo_practice.schema import EMAIL_PATTERN

USER_PUBLIC_PROJECTION = {"password": 0}

_EMAIL_RE = re.compile(EMAIL_PATTERN)
_WHITESPACE_RE = re.compile(r"\s+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def slugify(name: str) -> str:
    return _WHITESPACE_RE.sub("-", name.strip().lower())


# ======== Enums ========
class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"


class ProductCategory(str, Enum):
    ELECTRONICS = "electronics"
    CLOTHING = "clothing"
    BOOKS = "books"
    FURNITURE = "furniture"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class MongoModel(BaseModel):
    """Base for stored documents: ``_id`` plus created/updated timestamps."""

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        use_enum_values=True,
    )

    id: Optional[ObjectId] = Field(default=None, alias="_id")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")


# ======== Users ========
class Social(BaseModel):
    twitter: Optional[str] = None
    linkedin: Optional[str] = None


class Profile(BaseModel):
    bio: Optional[str] = None
    avatar: Optional[str] = None
    social: Social = Field(default_factory=Social)


class UserBase(MongoModel):
    name: str = Field(min_length=2)
    email: str
    age: Optional[int] = Field(default=None, ge=18, le=120)
    status: UserStatus = Field(default=UserStatus.ACTIVE, validate_default=True)
    profile: Profile = Field(default_factory=Profile)
    hobbies: List[str] = Field(default_factory=list)
    credits: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            if not _EMAIL_RE.match(v):
                raise ValueError("Invalid email format")
        return v

    def is_adult(self) -> bool:
        return self.age is not None and self.age >= 18


class User(UserBase):
    # only ever written; reads go through UserOut with the password projected out
    password: str = Field(min_length=6)


class UserOut(UserBase):
    @computed_field
    @property
    def profile_url(self) -> Optional[str]:
        return f"/users/{self.id}" if self.id is not None else None


# ======== Products ========
class Review(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    user: Optional[ObjectId] = None
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")


class Product(MongoModel):
    name: str = Field(min_length=1)
    slug: Optional[str] = None
    category: ProductCategory
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    images: List[str] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list)
    avg_rating: float = Field(default=0, alias="avgRating")

    # name the current slug was built from
    _slug_source: Optional[str] = PrivateAttr(default=None)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    def model_post_init(self, __context: Any) -> None:
        if not self.slug:
            self.slug = slugify(self.name)
        self._slug_source = self.name

    def sync_slug(self) -> None:
        """Rebuild the slug if the name changed since load or the last sync."""
        if self.name != self._slug_source:
            self.slug = slugify(self.name)
            self._slug_source = self.name

    def update_avg_rating(self) -> float:
        if not self.reviews:
            self.avg_rating = 0
        else:
            self.avg_rating = sum(r.rating for r in self.reviews) / len(self.reviews)
        return self.avg_rating


# ======== Orders ========
class OrderItem(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    product: ObjectId
    quantity: int = Field(default=1, ge=1)
    # price snapshot at order time
    price: float = Field(ge=0)


class ShippingAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    street: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zipCode")
    country: Optional[str] = None


class Order(MongoModel):
    order_number: str = Field(min_length=1, alias="orderNumber")
    user: ObjectId
    items: List[OrderItem] = Field(default_factory=list)
    total: float = Field(ge=0)
    status: OrderStatus = Field(default=OrderStatus.PENDING, validate_default=True)
    shipping_address: ShippingAddress = Field(default_factory=ShippingAddress, alias="shippingAddress")


def compute_total(items: List[OrderItem]) -> float:
    return round(sum(item.price * item.quantity for item in items), 2)


# ======== Document mapping ========
M = TypeVar("M", bound=MongoModel)


def to_document(model: MongoModel, touch: bool = True) -> Dict[str, Any]:
    """Serialize a model to the document shape stored in MongoDB.

    ``_id`` is omitted until the server has assigned one and computed fields
    are never stored.
    """
    if touch:
        model.updated_at = _utcnow()
    doc = model.model_dump(by_alias=True, exclude={"id", "profile_url"})
    if model.id is not None:
        doc["_id"] = model.id
    return doc


def from_document(cls: Type[M], doc: Optional[Dict[str, Any]]) -> Optional[M]:
    if doc is None:
        return None
    return cls.model_validate(doc)
