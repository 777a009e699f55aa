"""
Public routes for the marketing site.
Provides the portfolio gallery, homepage selections, business info and the contact form.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from studio.config import settings
from studio.database import get_db
from studio.schemas import (
    CategoryResponse,
    HomepageSettingsResponse,
    MessageCreate,
    MessageSubmittedResponse,
    PortfolioItemResponse,
    ProjectResponse,
    SiteInfoResponse,
)
from studio.services import catalog
from studio.utils.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)

router = APIRouter()

CONTACT_THANK_YOU = "Thank you for your message. We will get back to you soon."


@router.get("/site-info", response_model=SiteInfoResponse)
async def get_site_info():
    """Business name, contact details and marketing copy for the site chrome."""
    return SiteInfoResponse(
        owner_name=settings.OWNER_NAME,
        business_name=settings.BUSINESS_NAME,
        contact_email=settings.CONTACT_EMAIL,
        contact_phone=settings.CONTACT_PHONE,
        seo_title=settings.SEO_TITLE,
        seo_description=settings.SEO_DESCRIPTION,
        tagline=settings.TAGLINE,
        sub_tagline=settings.SUB_TAGLINE,
        about_description=settings.ABOUT_DESCRIPTION,
        social={
            "instagram": settings.SOCIAL_INSTAGRAM,
            "facebook": settings.SOCIAL_FACEBOOK,
            "linkedin": settings.SOCIAL_LINKEDIN,
            "houzz": settings.SOCIAL_HOUZZ,
        },
    )


@router.get("/projects", response_model=List[ProjectResponse])
async def get_projects(db: AsyncSession = Depends(get_db)):
    """
    Get all projects with their images for the portfolio page.

    Projects and each project's images are ordered by display_order ascending.
    """
    projects = await catalog.list_projects(db)
    logger.info(f"Retrieved {len(projects)} projects for portfolio")
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await catalog.get_project(db, project_id)
    return ProjectResponse.model_validate(project)


@router.get("/homepage", response_model=HomepageSettingsResponse)
async def get_homepage(db: AsyncSession = Depends(get_db)):
    """Homepage settings with the hero and about images resolved."""
    homepage = await catalog.get_homepage_settings(db)
    return HomepageSettingsResponse.model_validate(homepage)


@router.get("/categories", response_model=List[CategoryResponse])
async def get_categories(db: AsyncSession = Depends(get_db)):
    categories = await catalog.list_categories(db)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get("/portfolio-items", response_model=List[PortfolioItemResponse])
async def get_portfolio_items(db: AsyncSession = Depends(get_db)):
    items = await catalog.list_portfolio_items(db)
    logger.info(f"Retrieved {len(items)} portfolio items")
    return [PortfolioItemResponse.model_validate(i) for i in items]


@router.post("/messages", response_model=MessageSubmittedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["contact"])
async def submit_contact_form(
    request: Request,
    submission: MessageCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Store a contact form message for the admin inbox.
    Rate limited per client IP.
    """
    await catalog.create_message(
        db,
        name=submission.name,
        email=str(submission.email),
        message=submission.message,
    )
    return MessageSubmittedResponse(message=CONTACT_THANK_YOU)
