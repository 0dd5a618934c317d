# src/bookreviews/models/review.py
import datetime
from sqlalchemy import (Column, Integer, String, Text, DateTime, Boolean,
                        func, CheckConstraint, Index)
from sqlalchemy.orm import relationship
from bookreviews.core.ids import new_object_id
from bookreviews.db.session import Base


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(24), primary_key=True, default=new_object_id)
    # Reference by id, not a foreign key: a review may briefly outlive its
    # book between the book delete and the cascade (see crud_book.delete_book).
    book_id = Column(String(24), nullable=False, index=True)
    reviewer_name = Column(String(100), nullable=False)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=False)
    review_date = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    helpful = Column(Integer, default=0, server_default='0', nullable=False)
    verified = Column(Boolean, default=False, server_default='false', nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Read-only join used to show the book's title/author next to the review
    book = relationship(
        "Book",
        primaryjoin="foreign(Review.book_id) == Book.id",
        viewonly=True,
        lazy="joined",
    )

    __table_args__ = (
        # Ensure rating is between 1 and 5
        CheckConstraint('rating >= 1 AND rating <= 5', name='review_rating_check'),
        CheckConstraint('helpful >= 0', name='review_helpful_check'),
        Index('ix_reviews_book_rating', book_id, rating.desc()),
        Index('ix_reviews_review_date', review_date.desc()),
    )

    def __repr__(self):
        return f"<Review(id={self.id}, book_id={self.book_id}, rating={self.rating}, helpful={self.helpful})>"
