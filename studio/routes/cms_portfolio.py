"""
CMS routes for portfolio items (single images grouped by category).
All endpoints require a valid admin token.
"""
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from studio.database import get_db
from studio.exceptions import MissingFieldError
from studio.schemas import MoveRequest, MoveResponse, PortfolioItemResponse
from studio.services import catalog
from studio.routes.cms_projects import move_response
from studio.utils.jwt_auth import verify_cms_token
from studio.utils.rate_limit import limiter, RATE_LIMITS
from studio.utils.uploads import clean_text, read_upload

router = APIRouter(prefix="/cms", tags=["CMS"])


@router.get("/portfolio-items", response_model=List[PortfolioItemResponse])
async def get_cms_portfolio_items(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    items = await catalog.list_portfolio_items(db)
    return [PortfolioItemResponse.model_validate(i) for i in items]


@router.post("/portfolio-items", response_model=PortfolioItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["upload"])
async def create_cms_portfolio_item(
    request: Request,
    title: str = Form(...),
    category_id: int = Form(...),
    description: Optional[str] = Form(None),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Upload an image and append a portfolio item to the end of the list."""
    title = clean_text(title)
    if not title:
        raise MissingFieldError("Title")

    upload = await read_upload(file)
    if upload is None:
        raise MissingFieldError("File")

    item = await catalog.create_portfolio_item(
        db,
        title=title,
        category_id=category_id,
        description=clean_text(description),
        upload=upload,
    )
    return PortfolioItemResponse.model_validate(item)


@router.get("/portfolio-items/{item_id}", response_model=PortfolioItemResponse)
async def get_cms_portfolio_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    item = await catalog.get_portfolio_item(db, item_id)
    return PortfolioItemResponse.model_validate(item)


@router.put("/portfolio-items/{item_id}", response_model=PortfolioItemResponse)
async def update_cms_portfolio_item(
    item_id: int,
    title: Optional[str] = Form(None),
    category_id: Optional[int] = Form(None),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    fields = {}
    if title is not None:
        fields["title"] = clean_text(title)
        if not fields["title"]:
            raise MissingFieldError("Title")
    if category_id is not None:
        fields["category_id"] = category_id
    if description is not None:
        fields["description"] = clean_text(description)

    item = await catalog.update_portfolio_item(db, item_id, fields, upload=await read_upload(file))
    return PortfolioItemResponse.model_validate(item)


@router.delete("/portfolio-items/{item_id}")
async def delete_cms_portfolio_item(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    await catalog.delete_portfolio_item(db, item_id)
    return {"message": "Portfolio item deleted successfully", "item_id": item_id}


@router.post("/portfolio-items/{item_id}/move", response_model=MoveResponse)
async def move_cms_portfolio_item(
    item_id: int,
    move: MoveRequest,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    result = await catalog.move_portfolio_item(db, item_id, move.direction)
    return move_response("Portfolio item", result)
