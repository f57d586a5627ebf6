from datetime import datetime
from typing import Dict, List, Optional

from fastapi import UploadFile
from pydantic import BaseModel

from category_api.db.models.category import Category


# ─────────────────────────────────────────────────────────────────────
#  Pydantic
# ─────────────────────────────────────────────────────────────────────
class CategoryRead(BaseModel):
    id: int
    name: str
    description: str
    image: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NotFoundMessage(BaseModel):
    detail: str


def to_read(category: Category) -> CategoryRead:
    return CategoryRead(
        id=category.id,
        name=category.name,
        description=category.description or "",
        image=category.image,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


# ─────────────────────────────────────────────────────────────────────
#  Form validation
#     Errors are returned as {field: [message, ...]} with status 400.
# ─────────────────────────────────────────────────────────────────────
REQUIRED_MESSAGES = {
    "name": "Enter the category name",
    "image": "Choose the category image",
    "description": "Enter the category description",
}
INVALID_IMAGE_MESSAGE = "The uploaded file is not a supported image"

FieldErrors = Dict[str, List[str]]


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def has_upload(image: Optional[UploadFile]) -> bool:
    return image is not None and bool(image.filename)


def required_errors(fields: Dict[str, bool]) -> FieldErrors:
    """
    *fields* maps a field name to whether it was supplied.
    Returns one message per missing field, in REQUIRED_MESSAGES order.
    """
    return {
        field: [REQUIRED_MESSAGES[field]]
        for field in REQUIRED_MESSAGES
        if field in fields and not fields[field]
    }


def read_upload(image: UploadFile) -> bytes:
    image.file.seek(0)
    return image.file.read()
