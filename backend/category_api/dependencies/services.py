from fastapi import Depends, Request
from sqlalchemy.orm import Session

from category_api.db.database import get_db
from category_api.db.repository import CategoryRepository
from category_api.services.categories import CategoryService
from category_api.utils.storage import DerivativeStore


def get_category_repository(db: Session = Depends(get_db)) -> CategoryRepository:
    return CategoryRepository(db)


def get_derivative_store(request: Request) -> DerivativeStore:
    """
    The store is built once per app in create_app() and kept on app.state.
    """
    return request.app.state.derivative_store


def get_category_service(
    repository: CategoryRepository = Depends(get_category_repository),
    store: DerivativeStore = Depends(get_derivative_store),
) -> CategoryService:
    return CategoryService(repository, store)
