from typing import Optional

from fastapi import APIRouter, Depends, Form, UploadFile, File as FastFile
from fastapi.responses import JSONResponse

from category_api.dependencies.services import get_category_service
from category_api.services.categories import CategoryService
from .helpers import (
    REQUIRED_MESSAGES,
    CategoryRead,
    NotFoundMessage,
    has_upload,
    is_blank,
    read_upload,
    required_errors,
    to_read,
)

router = APIRouter()

FIELD_ERRORS = {
    400: {
        "description": "Field errors",
        "content": {
            "application/json": {
                "example": {"name": [REQUIRED_MESSAGES["name"]]},
            },
        },
    },
}


@router.post(
    "",
    response_model=CategoryRead,
    summary="Create a category",
    responses=FIELD_ERRORS,
)
def create_category(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = FastFile(None),
    service: CategoryService = Depends(get_category_service),
):
    """
    Multipart form with *name*, *description* and *image*, all required.
    The image is stored once per configured width before the row is saved.
    """
    contents = read_upload(image) if has_upload(image) else b""

    errors = required_errors({
        "name": not is_blank(name),
        "image": bool(contents),
        "description": not is_blank(description),
    })
    if errors:
        return JSONResponse(status_code=400, content=errors)

    category = service.create_category(
        name=name,
        description=description,
        image_bytes=contents,
        image_filename=image.filename,
    )
    return to_read(category)


@router.post(
    "/edit/{category_id}",
    response_model=CategoryRead,
    summary="Update a category",
    responses={**FIELD_ERRORS, 404: {"model": NotFoundMessage}},
)
def update_category(
    category_id: int,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = FastFile(None),
    service: CategoryService = Depends(get_category_service),
):
    """
    *name* is required. *description* is replaced only when sent.
    When a new *image* is sent its copies replace the old ones,
    otherwise the stored image is kept as is. An *image* part with a
    filename but no bytes is rejected like a missing required image.
    """
    service.get_category(category_id)  # 404 before validation

    contents = read_upload(image) if has_upload(image) else b""

    fields = {"name": not is_blank(name)}
    if has_upload(image):
        fields["image"] = bool(contents)
    errors = required_errors(fields)
    if errors:
        return JSONResponse(status_code=400, content=errors)

    category = service.update_category(
        category_id,
        name=name,
        description=description,
        image_bytes=contents or None,
        image_filename=image.filename if contents else None,
    )
    return to_read(category)
