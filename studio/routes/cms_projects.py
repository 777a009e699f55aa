"""
CMS routes for projects and their images.
All endpoints require a valid admin token.
"""
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from studio.database import get_db
from studio.exceptions import MissingFieldError
from studio.schemas import (
    MoveRequest,
    MoveResponse,
    ProjectCreate,
    ProjectImageResponse,
    ProjectResponse,
    ProjectUpdate,
    ReorderRequest,
    ReorderResponse,
)
from studio.services import catalog
from studio.services.ordering import MoveResult
from studio.utils.jwt_auth import verify_cms_token
from studio.utils.rate_limit import limiter, RATE_LIMITS
from studio.utils.uploads import clean_text, read_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cms", tags=["CMS"])


def move_response(entity: str, result: MoveResult) -> MoveResponse:
    return MoveResponse(
        message=f"{entity} moved successfully",
        id=result.entity_id,
        display_order=result.display_order,
        swapped_with_id=result.swapped_with_id,
        swapped_with_display_order=result.swapped_with_display_order,
    )


# Projects

@router.get("/projects", response_model=List[ProjectResponse])
async def get_cms_projects(
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """All projects with images, in display order."""
    projects = await catalog.list_projects(db)
    return [ProjectResponse.model_validate(p) for p in projects]


@router.post("/projects", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_cms_project(
    project: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Create a project; it is appended to the end of the list."""
    created = await catalog.create_project(
        db,
        name=project.name,
        description=project.description,
        location=project.location,
    )
    return ProjectResponse.model_validate(created)


@router.put("/projects/reorder", response_model=ReorderResponse)
async def reorder_cms_projects(
    reorder: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """
    Reorder projects from an array of ids.
    Projects not listed keep their relative order after the listed ones.
    """
    ids = await catalog.reorder_projects(db, reorder.ids)
    return ReorderResponse(message=f"Successfully reordered {len(reorder.ids)} projects", ids=ids)


@router.get("/projects/{project_id}", response_model=ProjectResponse)
async def get_cms_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    project = await catalog.get_project(db, project_id)
    return ProjectResponse.model_validate(project)


@router.put("/projects/{project_id}", response_model=ProjectResponse)
async def update_cms_project(
    project_id: int,
    project_update: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Partial update: only fields present in the body change."""
    project = await catalog.update_project(db, project_id, project_update.model_dump(exclude_unset=True))
    return ProjectResponse.model_validate(project)


@router.delete("/projects/{project_id}")
async def delete_cms_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Delete a project together with all of its images."""
    await catalog.delete_project(db, project_id)
    return {"message": "Project deleted successfully", "project_id": project_id}


@router.post("/projects/{project_id}/move", response_model=MoveResponse)
async def move_cms_project(
    project_id: int,
    move: MoveRequest,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Swap a project with its neighbor above ("up") or below ("down")."""
    result = await catalog.move_project(db, project_id, move.direction)
    return move_response("Project", result)


# Project images

@router.get("/projects/{project_id}/images", response_model=List[ProjectImageResponse])
async def get_cms_project_images(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    images = await catalog.list_project_images(db, project_id)
    return [ProjectImageResponse.model_validate(i) for i in images]


@router.post(
    "/projects/{project_id}/images",
    response_model=ProjectImageResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(RATE_LIMITS["upload"])
async def create_cms_project_image(
    request: Request,
    project_id: int,
    title: str = Form(...),
    description: Optional[str] = Form(None),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """
    Upload an image to Cloudinary and add it to the end of the project's images.
    Multipart form fields: file, title, description (optional).
    """
    title = clean_text(title)
    if not title:
        raise MissingFieldError("Title")

    upload = await read_upload(file)
    if upload is None:
        raise MissingFieldError("File")

    image = await catalog.create_project_image(
        db,
        project_id=project_id,
        title=title,
        description=clean_text(description),
        upload=upload,
    )
    return ProjectImageResponse.model_validate(image)


@router.put("/projects/{project_id}/images/reorder", response_model=ReorderResponse)
async def reorder_cms_project_images(
    project_id: int,
    reorder: ReorderRequest,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    ids = await catalog.reorder_project_images(db, project_id, reorder.ids)
    return ReorderResponse(message=f"Successfully reordered {len(reorder.ids)} images", ids=ids)


@router.get("/project-images/{image_id}", response_model=ProjectImageResponse)
async def get_cms_project_image(
    image_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    image = await catalog.get_project_image(db, image_id)
    return ProjectImageResponse.model_validate(image)


@router.put("/project-images/{image_id}", response_model=ProjectImageResponse)
async def update_cms_project_image(
    image_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """
    Update an image's title/description and optionally replace the file.
    An empty description clears it; omitted fields are left unchanged.
    """
    fields = {}
    if title is not None:
        fields["title"] = clean_text(title)
        if not fields["title"]:
            raise MissingFieldError("Title")
    if description is not None:
        fields["description"] = clean_text(description)

    image = await catalog.update_project_image(db, image_id, fields, upload=await read_upload(file))
    return ProjectImageResponse.model_validate(image)


@router.delete("/project-images/{image_id}")
async def delete_cms_project_image(
    image_id: int,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """
    Delete a project image row.
    Homepage slots pointing at it are cleared; the Cloudinary asset is kept.
    """
    await catalog.delete_project_image(db, image_id)
    return {"message": "Image deleted successfully", "image_id": image_id}


@router.post("/project-images/{image_id}/move", response_model=MoveResponse)
async def move_cms_project_image(
    image_id: int,
    move: MoveRequest,
    db: AsyncSession = Depends(get_db),
    admin: dict = Depends(verify_cms_token)
):
    """Swap an image with its neighbor within the same project."""
    result = await catalog.move_project_image(db, image_id, move.direction)
    return move_response("Image", result)
