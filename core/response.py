"""
Standardized API response helpers for consistent data structure
"""
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    page: int = Field(description="Current page number")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Total number of items")
    totalPages: int = Field(description="Total number of pages")


def success_response(
    data: Any = None,
    message: str = "Operation successful",
    meta: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create a success response"""
    return {
        "success": True,
        "message": message,
        "data": data,
        "meta": meta,
        "timestamp": datetime.utcnow().isoformat()
    }


def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create an error response"""
    return {
        "success": False,
        "message": message,
        "error_code": error_code,
        "details": details,
        "timestamp": datetime.utcnow().isoformat()
    }


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, Any]:
    """Build the pagination block used by list endpoints"""
    total_pages = (total + limit - 1) // limit if total else 0

    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        totalPages=total_pages
    ).model_dump()
