from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from bookreviews import crud
from bookreviews.db.session import get_db
from bookreviews.schemas.common import Message
from bookreviews.schemas.review import ReviewSchema
from bookreviews.validation import validate_object_id, validate_replacement, validate_review

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=List[ReviewSchema])
def list_reviews(
    book: Optional[str] = Query(None),
    rating: Optional[int] = None,
    sort: str = "reviewDate",
    order: str = "desc",
    db: Session = Depends(get_db),
):
    """Lists reviews, optionally only those of one book and/or with one exact rating."""
    book_id = validate_object_id(book, "book", field="book") if book else None
    return crud.list_reviews(db, book_id=book_id, rating=rating, sort=sort, order=order)


@router.get("/{review_id}", response_model=ReviewSchema)
def get_review(review_id: str, db: Session = Depends(get_db)):
    return crud.get_review(db, validate_object_id(review_id, "review"))


@router.post("", response_model=ReviewSchema, status_code=status.HTTP_201_CREATED)
def create_review(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """Creates a review; 404 when the referenced book does not exist."""
    return crud.create_review(db, validate_review(payload))


@router.put("/{review_id}", response_model=ReviewSchema)
def update_review(review_id: str, payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    review_id, review_in = validate_replacement(review_id, "review", payload, validate_review)
    return crud.update_review(db, review_id, review_in)


@router.delete("/{review_id}", response_model=Message)
def delete_review(review_id: str, db: Session = Depends(get_db)):
    crud.delete_review(db, validate_object_id(review_id, "review"))
    return Message(message="Review deleted successfully")


@router.patch("/{review_id}/helpful", response_model=ReviewSchema)
def mark_helpful(review_id: str, db: Session = Depends(get_db)):
    """Adds one to the review's helpful counter."""
    return crud.increment_helpful(db, validate_object_id(review_id, "review"))
