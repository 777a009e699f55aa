"""
CRUD operations for projects, project images, portfolio items, categories,
contact messages and the homepage settings row.

Every function works on the caller's session and commits its own writes.
Store failures surface as StudioError subclasses; reads never degrade to an
empty result.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence
import logging

from cloudinary.exceptions import Error as CloudinaryError
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studio.config import settings
from studio.exceptions import (
    ConflictError,
    InvalidFileTypeError,
    NotFoundError,
    StoreReadError,
    UploadFailureError,
    WriteFailureError,
)
from studio.models import Category, HomepageSettings, Message, PortfolioItem, Project, ProjectImage
from studio.schemas import HomepageSlot
from studio.services.cloudinary_service import build_public_id, upload_image
from studio.services.ordering import MoveDirection, MoveResult, move_one_step, next_display_order, reorder_scope
from studio.utils.image_converter import prepare_upload

logger = logging.getLogger(__name__)

PROJECT_IMAGES_FOLDER = "project-images"
PORTFOLIO_FOLDER = "portfolio"


@dataclass
class ImageUpload:
    """An uploaded file read into memory."""
    filename: str
    content_type: Optional[str]
    content: bytes


# Store helpers

async def _fetch_all(db: AsyncSession, query, what: str) -> list:
    try:
        result = await db.execute(query.execution_options(populate_existing=True))
    except SQLAlchemyError as e:
        logger.error(f"Error fetching {what}: {str(e)}", exc_info=True)
        raise StoreReadError(what, str(e)) from e
    return list(result.scalars().all())


async def _get_or_404(db: AsyncSession, model, entity_id: int):
    try:
        result = await db.execute(
            select(model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        entity = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching {model.__name__} {entity_id}: {str(e)}", exc_info=True)
        raise StoreReadError(model.__name__, str(e)) from e

    if entity is None:
        raise NotFoundError(model.__name__, entity_id)
    return entity


async def _commit(db: AsyncSession, entity_name: str, *refresh: Any) -> None:
    """Commit pending writes, then reload server-generated columns of `refresh`."""
    try:
        await db.commit()
        for entity in refresh:
            await db.refresh(entity)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error writing {entity_name}: {str(e)}", exc_info=True)
        raise WriteFailureError(entity_name, 1, str(e)) from e


async def upload_to_blob_store(upload: ImageUpload, folder: str) -> str:
    """
    Send an image to Cloudinary and return its public URL.

    Raises:
        InvalidFileTypeError: Content type is not image/*
        UploadFailureError: Cloudinary rejected the file
    """
    if not upload.content_type or not upload.content_type.startswith("image/"):
        raise InvalidFileTypeError(upload.filename, upload.content_type)

    content = await prepare_upload(upload.content, upload.filename)
    public_id = build_public_id(upload.filename)

    try:
        result = await upload_image(content, folder=folder, public_id=public_id)
    except (CloudinaryError, ValueError, OSError) as e:
        logger.error(f"Error uploading {upload.filename} to Cloudinary: {str(e)}")
        raise UploadFailureError(upload.filename, str(e)) from e

    return result["url"]


# Projects

async def list_projects(db: AsyncSession) -> list[Project]:
    return await _fetch_all(
        db,
        select(Project).order_by(Project.display_order.asc(), Project.id.asc()),
        "projects",
    )


async def get_project(db: AsyncSession, project_id: int) -> Project:
    return await _get_or_404(db, Project, project_id)


async def create_project(
    db: AsyncSession,
    name: str,
    description: Optional[str] = None,
    location: Optional[str] = None,
) -> Project:
    """Create a project at the end of the project list."""
    project = Project(
        name=name,
        description=description,
        location=location,
        display_order=await next_display_order(db, Project),
    )
    db.add(project)
    await _commit(db, "Project", project)

    logger.info(f"Created project {project.id} '{project.name}' (display_order={project.display_order})")
    return project


async def update_project(db: AsyncSession, project_id: int, fields: dict) -> Project:
    """Apply a partial update. display_order is only changed by move/reorder."""
    project = await get_project(db, project_id)
    for key in ("name", "description", "location"):
        if key in fields:
            setattr(project, key, fields[key])

    await _commit(db, "Project", project)
    logger.info(f"Updated project {project_id}: {sorted(fields)}")
    return project


async def delete_project(db: AsyncSession, project_id: int) -> None:
    """Delete a project and, through the cascade, all of its images."""
    project = await get_project(db, project_id)
    image_ids = [image.id for image in project.images]

    await _clear_homepage_references(db, image_ids)
    await db.delete(project)
    await _commit(db, "Project")

    logger.info(f"Deleted project {project_id} with {len(image_ids)} image(s)")


async def move_project(db: AsyncSession, project_id: int, direction: MoveDirection) -> MoveResult:
    return await move_one_step(db, Project, project_id, direction)


async def reorder_projects(db: AsyncSession, ids: Sequence[int]) -> list[int]:
    return await reorder_scope(db, Project, ids)


# Project images

async def list_project_images(db: AsyncSession, project_id: Optional[int] = None) -> list[ProjectImage]:
    query = select(ProjectImage)
    if project_id is not None:
        await get_project(db, project_id)
        query = query.where(ProjectImage.project_id == project_id)
    query = query.order_by(ProjectImage.display_order.asc(), ProjectImage.id.asc())
    return await _fetch_all(db, query, "project images")


async def get_project_image(db: AsyncSession, image_id: int) -> ProjectImage:
    return await _get_or_404(db, ProjectImage, image_id)


async def create_project_image(
    db: AsyncSession,
    project_id: int,
    title: str,
    upload: ImageUpload,
    description: Optional[str] = None,
) -> ProjectImage:
    """Upload an image and append it to the end of the project's image list."""
    await get_project(db, project_id)

    image_url = await upload_to_blob_store(upload, PROJECT_IMAGES_FOLDER)

    image = ProjectImage(
        project_id=project_id,
        title=title,
        description=description,
        image_url=image_url,
        display_order=await next_display_order(db, ProjectImage, ProjectImage.project_id == project_id),
    )
    db.add(image)
    await _commit(db, "ProjectImage", image)

    logger.info(f"Created project image {image.id} for project {project_id} (display_order={image.display_order})")
    return image


async def update_project_image(
    db: AsyncSession,
    image_id: int,
    fields: dict,
    upload: Optional[ImageUpload] = None,
) -> ProjectImage:
    """Apply a partial update; a new file replaces image_url."""
    image = await get_project_image(db, image_id)

    if upload is not None:
        image.image_url = await upload_to_blob_store(upload, PROJECT_IMAGES_FOLDER)
    for key in ("title", "description"):
        if key in fields:
            setattr(image, key, fields[key])

    await _commit(db, "ProjectImage", image)
    logger.info(f"Updated project image {image_id} (new file: {upload is not None})")
    return image


async def delete_project_image(db: AsyncSession, image_id: int) -> None:
    """Delete the row only; the Cloudinary asset is left in place."""
    image = await get_project_image(db, image_id)

    await _clear_homepage_references(db, [image_id])
    await db.delete(image)
    await _commit(db, "ProjectImage")

    logger.info(f"Deleted project image {image_id}")


async def move_project_image(db: AsyncSession, image_id: int, direction: MoveDirection) -> MoveResult:
    return await move_one_step(db, ProjectImage, image_id, direction, scope_columns=("project_id",))


async def reorder_project_images(db: AsyncSession, project_id: int, ids: Sequence[int]) -> list[int]:
    await get_project(db, project_id)
    return await reorder_scope(db, ProjectImage, ids, ProjectImage.project_id == project_id)


# Homepage settings

async def _load_homepage_settings(db: AsyncSession) -> Optional[HomepageSettings]:
    try:
        result = await db.execute(
            select(HomepageSettings)
            .where(HomepageSettings.id == settings.HOMEPAGE_SETTINGS_ID)
            .execution_options(populate_existing=True)
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching homepage settings: {str(e)}", exc_info=True)
        raise StoreReadError("homepage settings", str(e)) from e
    return result.scalar_one_or_none()


async def get_homepage_settings(db: AsyncSession) -> HomepageSettings:
    """
    Return the singleton row.

    Before anything has been selected the row may not exist yet; an unsaved,
    empty HomepageSettings is returned then and nothing is written.
    """
    homepage = await _load_homepage_settings(db)
    if homepage is None:
        return HomepageSettings(id=settings.HOMEPAGE_SETTINGS_ID)
    return homepage


async def ensure_homepage_settings(db: AsyncSession) -> HomepageSettings:
    """Return the singleton row, inserting it if missing."""
    homepage = await _load_homepage_settings(db)
    if homepage is not None:
        return homepage

    db.add(HomepageSettings(id=settings.HOMEPAGE_SETTINGS_ID))
    try:
        await db.commit()
        logger.info(f"Created homepage settings row {settings.HOMEPAGE_SETTINGS_ID}")
    except IntegrityError:
        # Inserted concurrently by another request
        await db.rollback()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating homepage settings: {str(e)}", exc_info=True)
        raise WriteFailureError("HomepageSettings", 1, str(e)) from e

    return await _load_homepage_settings(db)


async def set_featured_image(db: AsyncSession, slot: HomepageSlot, image_id: Optional[int]) -> HomepageSettings:
    """Point a homepage slot at a project image, or clear it with None."""
    slot = HomepageSlot(slot)
    if image_id is not None:
        await get_project_image(db, image_id)

    homepage = await ensure_homepage_settings(db)
    setattr(homepage, f"{slot.value}_image_id", image_id)
    await _commit(db, "HomepageSettings", homepage)

    logger.info(f"Set homepage {slot.value} image to {image_id}")
    return homepage


async def _clear_homepage_references(db: AsyncSession, image_ids: Sequence[int]) -> None:
    """Null out homepage slots pointing at images about to be deleted. Does not commit."""
    if not image_ids:
        return
    for column in (HomepageSettings.hero_image_id, HomepageSettings.about_image_id):
        await db.execute(
            update(HomepageSettings)
            .where(column.in_(image_ids))
            .values({column.key: None})
        )


# Messages

async def create_message(db: AsyncSession, name: str, email: str, message: str) -> Message:
    entry = Message(name=name, email=email, message=message, read=False)
    db.add(entry)
    await _commit(db, "Message", entry)

    logger.info(f"Stored contact message {entry.id} from {email}")
    return entry


async def list_messages(db: AsyncSession) -> tuple[list[Message], int]:
    """Messages newest first, plus the number still unread."""
    messages = await _fetch_all(
        db,
        select(Message).order_by(Message.created_at.desc(), Message.id.desc()),
        "messages",
    )
    return messages, sum(1 for m in messages if not m.read)


async def mark_message_read(db: AsyncSession, message_id: int) -> Message:
    entry = await _get_or_404(db, Message, message_id)
    entry.read = True
    await _commit(db, "Message", entry)
    return entry


async def delete_message(db: AsyncSession, message_id: int) -> None:
    entry = await _get_or_404(db, Message, message_id)
    await db.delete(entry)
    await _commit(db, "Message")
    logger.info(f"Deleted message {message_id}")


# Categories and portfolio items

async def list_categories(db: AsyncSession) -> list[Category]:
    return await _fetch_all(db, select(Category).order_by(Category.name.asc()), "categories")


async def create_category(db: AsyncSession, name: str) -> Category:
    try:
        result = await db.execute(select(func.count(Category.id)).where(Category.name == name))
        exists = result.scalar() > 0
    except SQLAlchemyError as e:
        raise StoreReadError("categories", str(e)) from e

    if exists:
        raise ConflictError(f"Category '{name}' already exists", {"name": name})

    category = Category(name=name)
    db.add(category)
    await _commit(db, "Category", category)
    return category


async def list_portfolio_items(db: AsyncSession) -> list[PortfolioItem]:
    return await _fetch_all(
        db,
        select(PortfolioItem).order_by(PortfolioItem.display_order.asc(), PortfolioItem.id.asc()),
        "portfolio items",
    )


async def get_portfolio_item(db: AsyncSession, item_id: int) -> PortfolioItem:
    return await _get_or_404(db, PortfolioItem, item_id)


async def create_portfolio_item(
    db: AsyncSession,
    title: str,
    category_id: int,
    upload: ImageUpload,
    description: Optional[str] = None,
) -> PortfolioItem:
    await _get_or_404(db, Category, category_id)

    image_url = await upload_to_blob_store(upload, PORTFOLIO_FOLDER)

    item = PortfolioItem(
        title=title,
        description=description,
        category_id=category_id,
        image_url=image_url,
        display_order=await next_display_order(db, PortfolioItem),
    )
    db.add(item)
    await _commit(db, "PortfolioItem", item)

    logger.info(f"Created portfolio item {item.id} (display_order={item.display_order})")
    return item


async def update_portfolio_item(
    db: AsyncSession,
    item_id: int,
    fields: dict,
    upload: Optional[ImageUpload] = None,
) -> PortfolioItem:
    item = await get_portfolio_item(db, item_id)

    if "category_id" in fields:
        await _get_or_404(db, Category, fields["category_id"])
    if upload is not None:
        item.image_url = await upload_to_blob_store(upload, PORTFOLIO_FOLDER)
    for key in ("title", "description", "category_id"):
        if key in fields:
            setattr(item, key, fields[key])

    await _commit(db, "PortfolioItem", item)
    return item


async def delete_portfolio_item(db: AsyncSession, item_id: int) -> None:
    item = await get_portfolio_item(db, item_id)
    await db.delete(item)
    await _commit(db, "PortfolioItem")
    logger.info(f"Deleted portfolio item {item_id}")


async def move_portfolio_item(db: AsyncSession, item_id: int, direction: MoveDirection) -> MoveResult:
    return await move_one_step(db, PortfolioItem, item_id, direction)
