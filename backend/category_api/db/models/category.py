from sqlalchemy import Column, Integer, String, Text, DateTime, func

from category_api.db.base_class import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")

    # Base filename only, e.g. "3f9a0c1d2b4e5f60.jpg".
    # The files on disk are "<width>_<image>" for every configured width.
    image = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Category {self.id} {self.name!r}>"
