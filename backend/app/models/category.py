"""
Category model and the profile/category association table.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, Table
from sqlalchemy.orm import relationship, validates

from ..database import Base
from ..slugs import slugify


# Composite primary key forbids duplicate (profile, category) pairs
business_category = Table(
    "business_category",
    Base.metadata,
    Column(
        "business_profile_id",
        String(36),
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("category_id", String(36), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Category(Base):
    """Directory category (restaurant, health, ...)."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), unique=True, nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(50), nullable=True)
    color = Column(String(7), nullable=True)  # Hex, e.g. #EF4444
    is_active = Column(Boolean, default=True)

    business_profiles = relationship("BusinessProfile", secondary=business_category, back_populates="categories")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @validates("name")
    def _sync_slug(self, key, name):
        self.slug = slugify(name)
        return name

    def __repr__(self):
        return f"<Category {self.name}>"
