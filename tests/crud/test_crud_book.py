# tests/crud/test_crud_book.py
import pytest
from pytest import approx

from sqlalchemy.exc import OperationalError

from bookreviews.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from bookreviews.core.ids import new_object_id
from bookreviews.crud import (
    create_book,
    create_review,
    delete_book,
    get_book,
    get_book_by_id,
    get_book_by_isbn,
    list_books,
    list_reviews,
    update_book,
)
from bookreviews.models.review import Review
from bookreviews.schemas.review import ReviewSchema
from bookreviews.validation import validate_book, validate_review

def test_create_book(db_session, book_payload):
    book = create_book(db_session, validate_book(book_payload))

    assert book.id is not None
    assert book.isbn == "978-3-16-148410-0"
    assert book.average_rating == 0
    assert book.number_of_reviews == 0
    assert get_book_by_isbn(db_session, "978-3-16-148410-0").id == book.id

def test_create_book_duplicate_isbn(db_session, book_payload):
    """A second book with the same ISBN is a conflict, not a raw IntegrityError."""
    create_book(db_session, validate_book(book_payload))

    book_payload["title"] = "Another Title"
    with pytest.raises(ConflictError) as exc_info:
        create_book(db_session, validate_book(book_payload))

    assert exc_info.value.message == "A book with this ISBN already exists"
    # The session is still usable after the rollback
    assert list_books(db_session).pagination.total == 1

def test_get_book_not_found(db_session):
    with pytest.raises(NotFoundError):
        get_book(db_session, new_object_id())

def test_update_book_replaces_fields(db_session, make_book):
    book = make_book(description="Old description", pages=300)

    updated = update_book(db_session, book.id, validate_book({
        "title": "New Title",
        "author": "New Author",
        "isbn": "0306406152",
        "publicationYear": 1999,
        "genre": "History",
    }))

    assert updated.id == book.id
    assert updated.title == "New Title"
    assert updated.genre == "History"
    # Omitted optional fields go back to their defaults
    assert updated.description is None
    assert updated.pages is None
    assert updated.language == "English"

def test_update_book_keeps_aggregates(db_session, make_book):
    book = make_book()
    create_review(db_session, validate_review({
        "book": book.id, "reviewerName": "Sam", "rating": 3, "reviewText": "Perfectly fine book.",
    }))

    updated = update_book(db_session, book.id, validate_book({
        "title": "Renamed", "author": "Test Author", "isbn": book.isbn,
        "publicationYear": 2001, "genre": "Science Fiction",
    }))

    assert updated.average_rating == approx(3.0)
    assert updated.number_of_reviews == 1

def test_update_book_not_found(db_session, book_payload):
    with pytest.raises(NotFoundError):
        update_book(db_session, new_object_id(), validate_book(book_payload))

def test_update_book_duplicate_isbn(db_session, make_book):
    first = make_book()
    second = make_book()

    with pytest.raises(ConflictError):
        update_book(db_session, second.id, validate_book({
            "title": "Clash", "author": "Someone", "isbn": first.isbn,
            "publicationYear": 2000, "genre": "Other",
        }))

    assert get_book(db_session, second.id).title != "Clash"

def test_delete_book_cascades_to_reviews(db_session, make_book):
    book = make_book()
    other = make_book()
    for rating in (2, 4):
        create_review(db_session, validate_review({
            "book": book.id, "reviewerName": "Kim", "rating": rating,
            "reviewText": "Cascade delete test review.",
        }))
    create_review(db_session, validate_review({
        "book": other.id, "reviewerName": "Kim", "rating": 5,
        "reviewText": "This one must survive.",
    }))

    assert delete_book(db_session, book.id) == 2

    with pytest.raises(NotFoundError):
        get_book(db_session, book.id)
    assert db_session.query(Review).filter(Review.book_id == book.id).count() == 0
    remaining = list_reviews(db_session)
    assert [r.book_id for r in remaining] == [other.id]

def test_delete_book_not_found(db_session):
    with pytest.raises(NotFoundError):
        delete_book(db_session, new_object_id())

def test_delete_book_commits_before_review_cascade(db_session, db_session_factory, make_book, monkeypatch):
    """If removing the reviews fails, the book stays deleted and its reviews are orphaned."""
    book = make_book()
    review = create_review(db_session, validate_review({
        "book": book.id, "reviewerName": "Kim", "rating": 3,
        "reviewText": "Left behind by a failed cascade.",
    }))

    def failing_execute(*args, **kwargs):
        raise OperationalError("DELETE FROM reviews", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "execute", failing_execute)

    with pytest.raises(InternalError):
        delete_book(db_session, book.id)

    check = db_session_factory()
    try:
        assert get_book_by_id(check, book.id) is None
        orphan = check.get(Review, review.id)
        assert orphan is not None
        assert orphan.book_id == book.id
        assert ReviewSchema.model_validate(orphan).book is None
    finally:
        check.close()

# --- list_books ---

def test_list_books_pagination(db_session, make_book):
    for _ in range(25):
        make_book()

    page = list_books(db_session, page=2, limit=10)

    assert len(page.books) == 10
    assert page.pagination.model_dump() == {"page": 2, "limit": 10, "total": 25, "pages": 3}

    last = list_books(db_session, page=3, limit=10)
    assert len(last.books) == 5

    # Pages do not overlap
    first_ids = {b.id for b in list_books(db_session, page=1, limit=10).books}
    assert first_ids.isdisjoint({b.id for b in page.books})

def test_list_books_empty(db_session):
    page = list_books(db_session)
    assert page.books == []
    assert page.pagination.total == 0
    assert page.pagination.pages == 0

def test_list_books_filters(db_session, make_book):
    make_book(title="Dune", author="Frank Herbert", genre="Science Fiction",
              description="Spice and sandworms")
    make_book(title="Emma", author="Jane Austen", genre="Romance")
    make_book(title="The Hobbit", author="J. R. R. Tolkien", genre="Fantasy",
              description="A journey to the Lonely Mountain")

    assert [b.title for b in list_books(db_session, genre="Romance").books] == ["Emma"]
    assert [b.title for b in list_books(db_session, author="herbert").books] == ["Dune"]
    # search ORs title, author and description, case-insensitively
    assert {b.title for b in list_books(db_session, search="SANDWORM").books} == {"Dune"}
    assert {b.title for b in list_books(db_session, search="austen").books} == {"Emma"}
    assert {b.title for b in list_books(db_session, search="the").books} == {"The Hobbit"}
    # filters combine
    assert list_books(db_session, genre="Fantasy", author="austen").books == []

def test_list_books_wildcards_are_literal(db_session, make_book):
    make_book(title="100% Natural")
    make_book(title="Ordinary")

    assert [b.title for b in list_books(db_session, search="%").books] == ["100% Natural"]
    assert list_books(db_session, search="_").books == []

def test_list_books_sorting(db_session, make_book):
    make_book(title="B", publicationYear=1990)
    make_book(title="A", publicationYear=2010)
    make_book(title="C", publicationYear=2000)

    asc_titles = [b.title for b in list_books(db_session, sort_by="title", order="asc").books]
    assert asc_titles == ["A", "B", "C"]

    by_year = [b.title for b in list_books(db_session, sort_by="publicationYear", order="desc").books]
    assert by_year == ["A", "C", "B"]

def test_list_books_unknown_sort_falls_back(db_session, make_book):
    make_book()
    make_book()
    assert len(list_books(db_session, sort_by="nonsense").books) == 2

@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0)])
def test_list_books_invalid_paging(db_session, page, limit):
    with pytest.raises(ValidationError):
        list_books(db_session, page=page, limit=limit)

def test_list_books_sort_by_publisher_and_language(db_session, make_book):
    make_book(title="B", publisher="Zed Press", language="Spanish")
    make_book(title="A", publisher="Acme Books", language="French")
    make_book(title="C", publisher="Mid House", language="German")

    by_publisher = [b.title for b in list_books(db_session, sort_by="publisher", order="asc").books]
    assert by_publisher == ["A", "C", "B"]

    by_language = [b.title for b in list_books(db_session, sort_by="language", order="desc").books]
    assert by_language == ["B", "C", "A"]
