"""
Response envelope and pagination schemas shared by every endpoint.
"""
from typing import Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard envelope: {success, message?, data?, errors?}."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    errors: Optional[Dict[str, List[str]]] = None


class Pagination(BaseModel):
    """Pagination metadata."""
    current_page: int
    per_page: int
    total_items: int
    total_pages: int


class Page(BaseModel, Generic[T]):
    """One page of items plus its metadata."""
    items: List[T]
    pagination: Pagination


def ok(data=None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(success=True, message=message, data=data)
