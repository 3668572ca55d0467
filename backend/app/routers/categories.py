"""
Categories router.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Category
from ..schemas.category import CategoryResponse
from ..schemas.common import ApiResponse, ok

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=ApiResponse[List[CategoryResponse]])
def list_categories(db: Session = Depends(get_db)):
    """Active categories, alphabetically."""
    categories = (
        db.query(Category)
        .filter(Category.is_active == True)  # noqa: E712
        .order_by(Category.name)
        .all()
    )
    return ok([CategoryResponse.model_validate(c) for c in categories])
