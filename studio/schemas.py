"""
Pydantic schemas for request and response data validation.
Defines data structures for API endpoints with automatic validation and serialization.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime
from enum import Enum
from typing import Optional, List

from studio.services.ordering import MoveDirection


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# Projects and project images

class ProjectImageResponse(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str] = None
    image_url: str
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProjectResponse(BaseModel):
    """
    Project with its images, images ordered by display_order.
    Used by both the public gallery and the CMS dashboard.
    """
    id: int
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    display_order: int
    created_at: datetime
    updated_at: datetime
    images: List[ProjectImageResponse] = []

    model_config = ConfigDict(from_attributes=True)


class ProjectCreate(BaseModel):
    """
    Request schema for creating a project.
    display_order is assigned by the server (appended to the end).
    """
    name: str = Field(min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Project name cannot be blank')
        return v.strip()

    @field_validator('description', 'location')
    @classmethod
    def strip_optional(cls, v):
        return _strip_or_none(v)


class ProjectUpdate(BaseModel):
    """Partial update; only fields present in the request body are changed."""
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None or not v.strip():
            raise ValueError('Project name cannot be blank')
        return v.strip()

    @field_validator('description', 'location')
    @classmethod
    def strip_optional(cls, v):
        return _strip_or_none(v)


# Ordering

class MoveRequest(BaseModel):
    """
    Request schema for moving an entity one step.
    "up"/"down" as shown in the dashboard; "backward"/"forward" are accepted too.
    """
    direction: MoveDirection

    @field_validator('direction', mode='before')
    @classmethod
    def normalize_direction(cls, v):
        if isinstance(v, str):
            return MoveDirection(v.strip().lower())
        return v


class MoveResponse(BaseModel):
    message: str
    id: int
    display_order: int
    swapped_with_id: int
    swapped_with_display_order: int


class ReorderRequest(BaseModel):
    """
    Request schema for reordering a list.
    Contains entity IDs in the desired display order.
    """
    ids: list[int] = Field(min_length=1)

    @field_validator('ids')
    @classmethod
    def validate_unique_ids(cls, v):
        if len(v) != len(set(v)):
            raise ValueError('Duplicate IDs are not allowed')
        return v


class ReorderResponse(BaseModel):
    message: str
    ids: list[int]


# Homepage settings

class HomepageSlot(str, Enum):
    HERO = "hero"
    ABOUT = "about"


class HomepageSettingsResponse(BaseModel):
    id: int
    hero_image_id: Optional[int] = None
    about_image_id: Optional[int] = None
    updated_at: Optional[datetime] = None
    hero_image: Optional[ProjectImageResponse] = None
    about_image: Optional[ProjectImageResponse] = None

    model_config = ConfigDict(from_attributes=True)


class FeaturedImageUpdate(BaseModel):
    """null clears the slot."""
    image_id: Optional[int] = None


# Messages

class MessageCreate(BaseModel):
    """Contact form submission."""
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    message: str = Field(min_length=1, max_length=5000)

    @field_validator('name', 'message')
    @classmethod
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be blank')
        return v.strip()


class MessageResponse(BaseModel):
    id: int
    name: str
    email: str
    message: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageSubmittedResponse(BaseModel):
    success: bool = True
    message: str


class MessagesListResponse(BaseModel):
    messages: List[MessageResponse]
    unread_count: int


# Categories and portfolio items

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Category name cannot be blank')
        return v.strip()


class CategoryResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PortfolioItemResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category_id: int
    image_url: str
    display_order: int
    created_at: datetime
    updated_at: datetime
    category: Optional[CategoryResponse] = None

    model_config = ConfigDict(from_attributes=True)


# Authentication

class LoginRequest(BaseModel):
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


# Business info

class SiteInfoResponse(BaseModel):
    """Business details rendered in the public site's header, footer and about section."""
    owner_name: str
    business_name: str
    contact_email: str
    contact_phone: str
    seo_title: str
    seo_description: str
    tagline: str
    sub_tagline: str
    about_description: List[str]
    social: dict[str, str]
