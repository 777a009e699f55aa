"""
CMS API routes: login, homepage settings, contact messages and categories.
Everything except login requires a valid admin token.
"""
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from studio.config import settings
from studio.database import get_db
from studio.schemas import (
    CategoryCreate,
    CategoryResponse,
    FeaturedImageUpdate,
    HomepageSettingsResponse,
    HomepageSlot,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    MessagesListResponse,
)
from studio.services import catalog
from studio.utils.jwt_auth import COOKIE_NAME, authenticate_admin, create_access_token, verify_cms_token
from studio.utils.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cms", tags=["CMS"])


# Session

@router.post("/login", response_model=LoginResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(request: Request, credentials: LoginRequest, response: Response):
    """
    Exchange the admin password for an expiring access token.

    The token is returned in the body and also set as an httpOnly cookie.
    Rate limited to slow down password guessing.
    """
    claims = authenticate_admin(credentials.password)
    token = create_access_token(claims)
    expires_in = settings.JWT_EXPIRE_MINUTES * 60

    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=expires_in,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )

    logger.info("Admin logged in")
    return LoginResponse(access_token=token, expires_in=expires_in)


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(key=COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/session")
async def get_session(admin: dict = Depends(verify_cms_token)):
    """Report whether the current token is still valid (401 otherwise)."""
    return {"authenticated": True, "role": admin.get("role"), "expires_at": admin.get("exp")}


# Homepage settings

@router.get("/homepage-settings", response_model=HomepageSettingsResponse)
async def get_homepage_settings(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    homepage = await catalog.get_homepage_settings(db)
    return HomepageSettingsResponse.model_validate(homepage)


@router.put("/homepage-settings/{slot}", response_model=HomepageSettingsResponse)
async def set_homepage_image(
    slot: HomepageSlot,
    selection: FeaturedImageUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """
    Select the project image shown in a homepage slot ("hero" or "about").
    Send {"image_id": null} to clear the slot.
    """
    homepage = await catalog.set_featured_image(db, slot, selection.image_id)
    return HomepageSettingsResponse.model_validate(homepage)


# Messages

@router.get("/messages", response_model=MessagesListResponse)
async def get_messages(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Contact messages, newest first."""
    messages, unread_count = await catalog.list_messages(db)
    logger.info(f"Retrieved {len(messages)} messages ({unread_count} unread)")
    return MessagesListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        unread_count=unread_count,
    )


@router.patch("/messages/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    message = await catalog.mark_message_read(db, message_id)
    return MessageResponse.model_validate(message)


@router.delete("/messages/{message_id}")
async def delete_message(
    message_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    await catalog.delete_message(db, message_id)
    return {"message": "Message deleted successfully", "message_id": message_id}


# Categories

@router.get("/categories", response_model=List[CategoryResponse])
async def get_categories(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    categories = await catalog.list_categories(db)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    created = await catalog.create_category(db, category.name)
    return CategoryResponse.model_validate(created)
