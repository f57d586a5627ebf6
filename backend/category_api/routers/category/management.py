from typing import List

from fastapi import APIRouter, Depends
from starlette.responses import Response

from category_api.dependencies.services import get_category_service
from category_api.services.categories import CategoryService
from .helpers import CategoryRead, NotFoundMessage, to_read

router = APIRouter()


@router.get("", response_model=List[CategoryRead], summary="List all categories")
def list_categories(service: CategoryService = Depends(get_category_service)):
    """
    Every category in id order.
    """
    return [to_read(c) for c in service.list_categories()]


@router.get(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Get a category by id",
    responses={404: {"model": NotFoundMessage}},
)
def get_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
):
    return to_read(service.get_category(category_id))


@router.delete(
    "/{category_id}",
    status_code=204,
    summary="Delete a category and its images",
    responses={404: {"model": NotFoundMessage}},
)
def delete_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
):
    """
    Remove the row first, then every resized copy of its image.
    """
    service.delete_category(category_id)
    return Response(status_code=204)
