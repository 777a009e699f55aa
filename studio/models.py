"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from studio.database import Base


class Project(Base):
    """
    Portfolio project.
    Ordered among all projects by display_order; owns its images.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    images = relationship(
        "ProjectImage",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by=lambda: [ProjectImage.display_order, ProjectImage.id],
        lazy="selectin",
    )


class ProjectImage(Base):
    """
    Image belonging to a project.
    Ordered among the images of the same project by display_order.
    """
    __tablename__ = "project_images"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=False)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    project = relationship("Project", back_populates="images")


class HomepageSettings(Base):
    """Singleton row selecting the hero and about images of the home page."""
    __tablename__ = "homepage_settings"

    id = Column(Integer, primary_key=True)
    hero_image_id = Column(
        Integer,
        ForeignKey("project_images.id", ondelete="SET NULL"),
        nullable=True,
    )
    about_image_id = Column(
        Integer,
        ForeignKey("project_images.id", ondelete="SET NULL"),
        nullable=True,
    )
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    hero_image = relationship("ProjectImage", foreign_keys=[hero_image_id], lazy="selectin")
    about_image = relationship("ProjectImage", foreign_keys=[about_image_id], lazy="selectin")


class Message(Base):
    """Contact form message left by a site visitor."""
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    items = relationship("PortfolioItem", back_populates="category")


class PortfolioItem(Base):
    """
    Single-image portfolio entry grouped by category.
    Ordered among all portfolio items by display_order.
    """
    __tablename__ = "portfolio_items"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    image_url = Column(String, nullable=False)
    display_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    category = relationship("Category", back_populates="items", lazy="selectin")
