"""
Ratings Service

Keeps the denormalized rating fields on Book in sync with its reviews:
- average_rating: mean of the ratings of every review referencing the book,
  rounded half-up to 2 decimal places (0 when there are none)
- number_of_reviews: how many reviews reference the book

The review repository calls `recompute_book_rating` after every create, update
or delete. The recompute runs in its own commit after the review write, so a
crash between the two leaves the aggregate stale until the next recompute;
`recalculate_all_book_ratings` repairs every book in one pass.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookreviews.core.exceptions import InternalError
from bookreviews.models.book import Book
from bookreviews.models.review import Review

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def round_average(total: int, count: int) -> float:
    """
    Average of `count` integer ratings summing to `total`, rounded half-up to 2 places.

    The float quotient is rounded as stored (107/40 is 2.67499... and gives 2.67,
    33/8 is exactly 4.125 and gives 4.13). Returns 0.0 when `count` is 0.
    """
    if count == 0:
        return 0.0
    average = Decimal(total / count).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return float(average)


def calculate_average(ratings: Iterable[int]) -> Tuple[float, int]:
    """
    Pure fold over a set of ratings.

    Args:
        ratings: Ratings of the reviews of one book.

    Returns:
        Tuple[float, int]: (average_rating, number_of_reviews).
    """
    total = 0
    count = 0
    for rating in ratings:
        total += rating
        count += 1
    return round_average(total, count), count


def recompute_book_rating(db: Session, book_id: str) -> Tuple[float, int]:
    """
    Recalculate and store a book's rating aggregates from its current reviews.

    Idempotent: running it again with the same reviews writes the same values.
    If the book no longer exists the update matches no row and nothing changes.

    Args:
        db: Database session
        book_id: ID of the book to update

    Returns:
        Tuple[float, int]: The (average_rating, number_of_reviews) written.

    Note:
        This function commits the changes to the database.
    """
    stmt = select(Review.rating).where(Review.book_id == book_id)

    try:
        average, count = calculate_average(db.execute(stmt).scalars().all())

        db.execute(
            update(Book)
            .where(Book.id == book_id)
            .values(average_rating=average, number_of_reviews=count)
        )
        db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Error recomputing rating for book {book_id}: {e}")
        db.rollback()
        raise InternalError(str(e)) from e

    logger.info(f"Rating for book {book_id} recomputed: average={average:.2f}, reviews={count}.")
    return average, count


def recalculate_all_book_ratings(db: Session) -> int:
    """
    Recalculate rating aggregations for all books.

    Useful for repairing aggregates left stale by an interrupted write.

    Args:
        db: Database session

    Returns:
        Number of books updated
    """
    book_ids = db.execute(select(Book.id)).scalars().all()

    for book_id in book_ids:
        recompute_book_rating(db, book_id)

    logger.info(f"Recomputed ratings for {len(book_ids)} books.")
    return len(book_ids)
