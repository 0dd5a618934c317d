from .crud_book import (
    list_books,
    get_book,
    get_book_by_id,
    get_book_by_isbn,
    create_book,
    update_book,
    delete_book,
)
from .crud_review import (
    list_reviews,
    get_reviews_for_book,
    get_review,
    get_review_by_id,
    create_review,
    update_review,
    delete_review,
    increment_helpful,
)

__all__ = [
    "list_books",
    "get_book",
    "get_book_by_id",
    "get_book_by_isbn",
    "create_book",
    "update_book",
    "delete_book",
    "list_reviews",
    "get_reviews_for_book",
    "get_review",
    "get_review_by_id",
    "create_review",
    "update_review",
    "delete_review",
    "increment_helpful",
]
