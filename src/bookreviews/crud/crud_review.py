from sqlalchemy.orm import Session
from sqlalchemy import select, update, asc, desc
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from ..core.exceptions import InternalError, NotFoundError
from ..models.review import Review
from ..schemas.review import ReviewCreate
from ..services.ratings import recompute_book_rating
from .crud_book import get_book, resolve_sort

logger = logging.getLogger(__name__)

# API sort names -> column
REVIEW_SORT_FIELDS = {
    "reviewDate": Review.review_date,
    "rating": Review.rating,
    "helpful": Review.helpful,
    "reviewerName": Review.reviewer_name,
    "createdAt": Review.created_at,
    "updatedAt": Review.updated_at,
}
DEFAULT_REVIEW_SORT = "reviewDate"


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Error committing review {action}: {e}")
        db.rollback()
        raise InternalError(str(e)) from e


def list_reviews(
    db: Session,
    book_id: Optional[str] = None,
    rating: Optional[int] = None,
    sort: str = DEFAULT_REVIEW_SORT,
    order: str = "desc",
) -> List[Review]:
    """
    Lists reviews, optionally filtered by book and/or exact rating.
    Each review carries its book (title/author) through the joined `book` relationship.
    """
    stmt = select(Review)
    if book_id:
        stmt = stmt.where(Review.book_id == book_id)
    if rating is not None:
        stmt = stmt.where(Review.rating == rating)

    ordering = resolve_sort(sort, order, REVIEW_SORT_FIELDS, DEFAULT_REVIEW_SORT)
    tiebreak = asc(Review.id) if order == "asc" else desc(Review.id)
    stmt = stmt.order_by(ordering, tiebreak)

    try:
        return db.execute(stmt).unique().scalars().all()
    except SQLAlchemyError as e:
        logger.exception(f"Error listing reviews: {e}")
        raise InternalError(str(e)) from e


def get_reviews_for_book(db: Session, book_id: str) -> List[Review]:
    """Gets every review of an existing book, newest review date first."""
    get_book(db, book_id)
    return list_reviews(db, book_id=book_id, sort="reviewDate", order="desc")


def get_review_by_id(db: Session, review_id: str) -> Review | None:
    """Gets a specific review by its ID, or None."""
    return db.get(Review, review_id)


def get_review(db: Session, review_id: str) -> Review:
    review = get_review_by_id(db, review_id)
    if review is None:
        logger.warning(f"Review {review_id} not found.")
        raise NotFoundError("Review not found")
    return review


def create_review(db: Session, review: ReviewCreate) -> Review:
    """
    Creates a review for an existing book and recomputes that book's rating.

    Raises:
        NotFoundError: If the referenced book does not exist. Nothing is written.
    """
    get_book(db, review.book_id)

    data = review.model_dump(exclude_none=True)
    db_review = Review(**data)
    db.add(db_review)
    _commit(db, "creation")
    logger.info(f"Review {db_review.id} created for book {db_review.book_id}.")

    # The aggregate is written in its own commit, after the review.
    recompute_book_rating(db, db_review.book_id)

    db.refresh(db_review)
    return db_review


def update_review(db: Session, review_id: str, review: ReviewCreate) -> Review:
    """
    Replaces a review's editable fields and recomputes the affected ratings.

    The old book is always recomputed; the new book is recomputed as well only
    when the review was moved to a different book. `review_date` changes only
    when supplied, and `helpful` is never touched here.

    Raises:
        NotFoundError: If the referenced book or the review does not exist.
    """
    get_book(db, review.book_id)
    db_review = get_review(db, review_id)
    old_book_id = db_review.book_id

    db_review.book_id = review.book_id
    db_review.reviewer_name = review.reviewer_name
    db_review.rating = review.rating
    db_review.review_text = review.review_text
    db_review.verified = review.verified
    if review.review_date is not None:
        db_review.review_date = review.review_date
    _commit(db, "update")
    logger.info(f"Review {review_id} updated.")

    recompute_book_rating(db, old_book_id)
    if old_book_id != review.book_id:
        logger.info(f"Review {review_id} moved from book {old_book_id} to {review.book_id}.")
        recompute_book_rating(db, review.book_id)

    db.refresh(db_review)
    return db_review


def delete_review(db: Session, review_id: str) -> None:
    """
    Deletes a review and recomputes its book's rating.

    Raises:
        NotFoundError: If the review does not exist.
    """
    db_review = get_review(db, review_id)
    book_id = db_review.book_id  # Get book_id BEFORE deleting

    db.delete(db_review)
    _commit(db, "deletion")
    logger.info(f"Review {review_id} deleted.")

    recompute_book_rating(db, book_id)


def increment_helpful(db: Session, review_id: str) -> Review:
    """
    Adds 1 to a review's `helpful` counter.

    The increment is a single UPDATE evaluated by the database, so concurrent
    calls never lose updates.

    Raises:
        NotFoundError: If the review does not exist.
    """
    stmt = (
        update(Review)
        .where(Review.id == review_id)
        .values(helpful=Review.helpful + 1)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
    except SQLAlchemyError as e:
        logger.exception(f"Error incrementing helpful for review {review_id}: {e}")
        db.rollback()
        raise InternalError(str(e)) from e

    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Attempted to mark non-existent review {review_id} as helpful.")
        raise NotFoundError("Review not found")
    _commit(db, "helpful increment")

    return get_review(db, review_id)
