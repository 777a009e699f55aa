"""Shared test fixtures.

Environment variables are set before any studio import so that the settings
singleton, the engine and the rate limiter pick up the test configuration.
Every test gets a fresh in-memory SQLite database.
"""

import io
import os

import bcrypt

TEST_PASSWORD = "correct horse battery staple"

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["COOKIE_SECURE"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_PASSWORD_HASH"] = bcrypt.hashpw(
    TEST_PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)
).decode("utf-8")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import cloudinary.uploader
import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession

from studio.database import AsyncSessionLocal, create_tables, drop_tables, engine
from studio.main import app
from studio.services import catalog
from studio.services.catalog import ImageUpload
from studio.utils.jwt_auth import create_access_token


@pytest.fixture(autouse=True)
async def database() -> AsyncGenerator[None]:
    """Create all tables, then drop them and release the shared in-memory connection."""
    await create_tables()
    yield
    await drop_tables()
    await engine.dispose()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> dict:
    token = create_access_token({"role": "admin", "sub": "cms_admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_cloudinary(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    """Replace cloudinary.uploader.upload; returns the list of recorded uploads."""
    uploads = []

    def fake_upload(file, folder=None, public_id=None, **kwargs):
        uploads.append({"folder": folder, "public_id": public_id, "bytes": len(file)})
        return {
            "secure_url": f"https://res.cloudinary.com/test/image/upload/v1/{folder}/{public_id}",
            "public_id": f"{folder}/{public_id}",
            "format": "webp",
            "width": 16,
            "height": 16,
            "bytes": len(file),
        }

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
    return uploads


@pytest.fixture
def make_upload(png_bytes):
    def _make(filename: str = "room.png") -> ImageUpload:
        return ImageUpload(filename=filename, content_type="image/png", content=png_bytes)

    return _make


@pytest.fixture
def add_image(db_session, fake_cloudinary, make_upload):
    """Create a project image through the catalog with a fake upload."""

    async def _add(project_id: int, title: str):
        return await catalog.create_project_image(
            db_session,
            project_id=project_id,
            title=title,
            upload=make_upload(f"{title}.png"),
        )

    return _add
