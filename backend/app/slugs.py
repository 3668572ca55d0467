"""
URL-safe slug generation.
"""
import re
import unicodedata
from typing import Optional

from sqlalchemy.orm import Session


def slugify(value: str) -> str:
    """'Café & Bar Nº1' -> 'cafe-bar-no1'."""
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^\w\s-]", "", value.lower())
    value = re.sub(r"[\s_-]+", "-", value).strip("-")
    return value or "profile"


def unique_slug(db: Session, model, name: str, exclude_id: Optional[str] = None) -> str:
    """
    Slug for `name` that no other row of `model` uses.

    Collisions get a numeric suffix: name, name-2, name-3, ...
    """
    base = slugify(name)
    candidate = base
    suffix = 2
    while True:
        query = db.query(model.id).filter(model.slug == candidate)
        if exclude_id is not None:
            query = query.filter(model.id != exclude_id)
        if query.first() is None:
            return candidate
        candidate = f"{base}-{suffix}"
        suffix += 1
