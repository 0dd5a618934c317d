from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from bookreviews import crud
from bookreviews.core.config import settings
from bookreviews.db.session import get_db
from bookreviews.schemas.book import BookPage, BookSchema
from bookreviews.schemas.common import Message
from bookreviews.schemas.review import ReviewSchema
from bookreviews.validation import validate_book, validate_object_id, validate_replacement

router = APIRouter(prefix="/api/books", tags=["books"])


@router.get("", response_model=BookPage)
def list_books(
    genre: Optional[str] = None,
    author: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_LIMIT,
    sort_by: str = Query("createdAt", alias="sortBy"),
    order: str = "desc",
    db: Session = Depends(get_db),
):
    """Lists books filtered by genre, author or a free-text search, one page at a time."""
    return crud.list_books(
        db,
        genre=genre,
        author=author,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
    )


@router.get("/{book_id}", response_model=BookSchema)
def get_book(book_id: str, db: Session = Depends(get_db)):
    return crud.get_book(db, validate_object_id(book_id, "book"))


@router.post("", response_model=BookSchema, status_code=status.HTTP_201_CREATED)
def create_book(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Creates a book. Duplicate ISBNs are rejected with 400."""
    return crud.create_book(db, validate_book(payload))


@router.put("/{book_id}", response_model=BookSchema)
def update_book(book_id: str, payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Replaces a book's editable fields."""
    book_id, book_in = validate_replacement(book_id, "book", payload, validate_book)
    return crud.update_book(db, book_id, book_in)


@router.delete("/{book_id}", response_model=Message)
def delete_book(book_id: str, db: Session = Depends(get_db)):
    """Deletes a book together with all of its reviews."""
    crud.delete_book(db, validate_object_id(book_id, "book"))
    return Message(message="Book and associated reviews deleted successfully")


@router.get("/{book_id}/reviews", response_model=List[ReviewSchema])
def list_book_reviews(book_id: str, db: Session = Depends(get_db)):
    return crud.get_reviews_for_book(db, validate_object_id(book_id, "book"))
