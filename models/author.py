from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Integer, Text, CheckConstraint, Index

from models.base_model import BaseModel, Base, _uuid_str


class Author(BaseModel, Base):
    __tablename__ = "authors"

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    name = Column(String(128), nullable=False)  # not unique; names can collide
    email = Column(String(255), nullable=False, unique=True, index=True)
    bio = Column(Text, nullable=True)
    nationality = Column(String(128), nullable=True)
    birth_year = Column(Integer, nullable=True)

    # Deleting an author removes its books
    books = relationship(
        "Book",
        back_populates="author",
        cascade="all, delete-orphan",
        order_by="Book.published_year.desc()",
    )

    __table_args__ = (
        CheckConstraint("(birth_year IS NULL) OR (birth_year >= 1)", name="ck_authors_birth_year_positive"),
        Index("ix_authors_name", "name"),
    )
