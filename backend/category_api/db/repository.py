from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from category_api.db.models.category import Category


class CategoryRepository:
    """
    Thin persistence wrapper around a request-scoped SQLAlchemy session.

    Every mutating call commits; on a database error the session is
    rolled back and the error propagates to the caller.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.id).all()

    def get(self, category_id: int) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def create(self, name: str, description: str, image: str) -> Category:
        category = Category(name=name, description=description, image=image)
        self.db.add(category)
        self._commit()
        self.db.refresh(category)
        return category

    def update(self, category: Category, **fields) -> Category:
        for key, value in fields.items():
            setattr(category, key, value)
        self.db.add(category)
        self._commit()
        self.db.refresh(category)
        return category

    def delete(self, category: Category) -> None:
        self.db.delete(category)
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
