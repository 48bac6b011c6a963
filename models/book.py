from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Text,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Book(BaseModel, Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    # Store separator-free ISBN-10/13; uniqueness enforced here
    isbn = Column(String(13), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    published_year = Column(Integer, nullable=True)
    genre = Column(String(64), nullable=True)
    pages = Column(Integer, nullable=True)  # validated >= 1 if provided (in schema)

    author_id = Column(String(36), ForeignKey("authors.id", ondelete="CASCADE"), nullable=False, index=True)

    author = relationship("Author", back_populates="books")

    __table_args__ = (
        CheckConstraint("(pages IS NULL) OR (pages >= 1)", name="ck_books_pages_positive"),
        CheckConstraint("(published_year IS NULL) OR (published_year >= 1)", name="ck_books_published_year_positive"),
        Index("ix_books_title", "title"),
        Index("ix_books_genre", "genre"),
    )
