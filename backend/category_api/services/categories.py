import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from category_api.db.models.category import Category
from category_api.db.repository import CategoryRepository
from category_api.utils.storage import DerivativeStore

logger = logging.getLogger(__name__)


class CategoryNotFoundError(Exception):
    """Raised when no category has the requested id."""

    def __init__(self, category_id: int):
        super().__init__(f"Category {category_id} not found")
        self.category_id = category_id


class CategoryService:
    """
    Keeps category rows and their image files in step.

    Files are written before the row is committed and removed only
    after the row change is committed. If the commit fails, the files
    written for this request are removed again.
    """

    def __init__(self, repository: CategoryRepository, store: DerivativeStore):
        self.repository = repository
        self.store = store

    def list_categories(self) -> List[Category]:
        return self.repository.list_all()

    def get_category(self, category_id: int) -> Category:
        category = self.repository.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    def create_category(
        self,
        name: str,
        description: str,
        image_bytes: bytes,
        image_filename: str,
    ) -> Category:
        filename = self.store.save(image_bytes, image_filename)
        try:
            category = self.repository.create(
                name=name, description=description, image=filename
            )
        except SQLAlchemyError:
            logger.exception("Creating category failed, removing %s", filename)
            self.store.delete(filename)
            raise

        logger.info("Created category %s (%s)", category.id, filename)
        return category

    def update_category(
        self,
        category_id: int,
        name: str,
        description: Optional[str] = None,
        image_bytes: Optional[bytes] = None,
        image_filename: Optional[str] = None,
    ) -> Category:
        category = self.get_category(category_id)
        old_image = category.image

        fields = {"name": name}
        if description is not None:
            fields["description"] = description

        new_image = None
        if image_bytes:
            new_image = self.store.save(image_bytes, image_filename or "")
            fields["image"] = new_image

        try:
            category = self.repository.update(category, **fields)
        except SQLAlchemyError:
            if new_image:
                logger.exception("Updating category %s failed, removing %s", category_id, new_image)
                self.store.delete(new_image)
            raise

        if new_image and old_image != new_image:
            self.store.delete(old_image)

        logger.info("Updated category %s", category_id)
        return category

    def delete_category(self, category_id: int) -> None:
        category = self.get_category(category_id)
        image = category.image

        self.repository.delete(category)
        self.store.delete(image)
        logger.info("Deleted category %s", category_id)
