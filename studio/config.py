"""
Configuration management for the studio API.
Uses Pydantic Settings for environment variable management.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Interior Design Studio API"
    API_VERSION: str = "0.1.0"
    API_DESCRIPTION: str = "Backend API for the portfolio website and admin back-office"

    # CORS Configuration
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8000",
        "http://127.0.0.1:8000",
    ]

    # Database Configuration
    # Empty means an in-memory SQLite database (development and tests)
    DATABASE_URL: str = ""
    # Create missing tables on startup instead of relying on Alembic
    DB_CREATE_TABLES: bool = False

    # Cloudinary Configuration
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    # Number of upload attempts; 1 disables retries
    CLOUDINARY_UPLOAD_RETRIES: int = 1

    # Admin password, bcrypt hashed (see `python -m studio.manage hash-password`)
    ADMIN_PASSWORD_HASH: str = ""

    # JWT Configuration
    # Long random string (e.g., generated with: openssl rand -hex 32); admin login is refused while empty
    JWT_SECRET_KEY: str = ""
    JWT_EXPIRE_MINUTES: int = 60
    COOKIE_SECURE: bool = True

    # Rate limiting (disabled in tests)
    RATE_LIMIT_ENABLED: bool = True
    # Reverse proxies whose X-Forwarded-For header is trusted for the client IP
    TRUSTED_PROXIES: List[str] = []

    # Fixed id of the homepage settings singleton row
    HOMEPAGE_SETTINGS_ID: int = 1

    # Business information shown on the public site
    OWNER_NAME: str = "Gay Solomon"
    BUSINESS_NAME: str = "Gay Solomon Interior Design"
    CONTACT_EMAIL: str = "gay.solomon@sbcglobal.net"
    CONTACT_PHONE: str = "+1 (214) 521-1933"
    SEO_TITLE: str = "Gay Solomon Interior Design"
    SEO_DESCRIPTION: str = "Design for the modern but comfortable home, office, and retreat"
    TAGLINE: str = "Design for the modern but comfortable home, office, and retreat"
    SUB_TAGLINE: str = "Gay Solomon designs spaces for vacation homes, mountain homes, and urban homes"
    ABOUT_DESCRIPTION: List[str] = [
        "With a focus on contemporary, simple, and functional design, Gay Solomon creates "
        "interiors that are both beautiful and livable.",
        "Each project is approached with careful consideration of the client's lifestyle, "
        "the architecture of the space, and the surrounding environment.",
    ]
    SOCIAL_INSTAGRAM: str = ""
    SOCIAL_FACEBOOK: str = ""
    SOCIAL_LINKEDIN: str = ""
    SOCIAL_HOUZZ: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings


# Global settings instance
settings = Settings()
