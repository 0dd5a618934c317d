"""
Operaciones CRUD para el modelo Book en la base de datos.
Incluye el listado filtrado y paginado, la obtención por ID o ISBN, la creación, el
reemplazo y el borrado de libros con su cascada explícita sobre las reseñas.
"""

import logging
import math
from typing import Optional

from sqlalchemy import select, or_, func, delete, asc, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from ..models.book import Book
from ..models.review import Review
from ..schemas.book import BookCreate, BookPage, BookSchema, Pagination

logger = logging.getLogger(__name__)

DUPLICATE_ISBN_MESSAGE = "A book with this ISBN already exists"

# Nombres de orden aceptados en la API -> columna
BOOK_SORT_FIELDS = {
    "createdAt": Book.created_at,
    "updatedAt": Book.updated_at,
    "title": Book.title,
    "author": Book.author,
    "isbn": Book.isbn,
    "genre": Book.genre,
    "description": Book.description,
    "publisher": Book.publisher,
    "language": Book.language,
    "publicationYear": Book.publication_year,
    "pages": Book.pages,
    "averageRating": Book.average_rating,
    "numberOfReviews": Book.number_of_reviews,
}
DEFAULT_BOOK_SORT = "createdAt"


def like_pattern(term: str) -> str:
    """Patrón LIKE de subcadena en el que `%`, `_` y `\\` del término se tratan como literales."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def resolve_sort(sort_by: Optional[str], order: Optional[str], columns: dict, default: str):
    """
    Traduce un nombre de campo y un sentido de orden a una expresión ORDER BY.

    Los campos desconocidos vuelven al campo por defecto; `order="asc"` ordena de forma
    ascendente y cualquier otro valor de forma descendente.
    """
    column = columns.get(sort_by or default)
    if column is None:
        logger.warning(f"Unknown sort field '{sort_by}', falling back to '{default}'.")
        column = columns[default]
    return asc(column) if order == "asc" else desc(column)


def list_books(
    db: Session,
    genre: Optional[str] = None,
    author: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = DEFAULT_BOOK_SORT,
    order: str = "desc",
) -> BookPage:
    """
    Lista libros filtrados, ordenados y paginados.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        genre (Optional[str]): Género exacto.
        author (Optional[str]): Subcadena del autor, sin distinción de mayúsculas.
        search (Optional[str]): Subcadena buscada en título, autor o descripción (OR).
        page (int): Página, empezando en 1.
        limit (int): Tamaño de página.
        sort_by (str): Campo de orden en su nombre de API (p. ej. "publicationYear").
        order (str): "asc" o "desc".

    Returns:
        BookPage: Libros de la página y datos de paginación (total y número de páginas).

    Raises:
        ValidationError: Si `page` o `limit` son menores que 1.
    """
    errors = []
    if page < 1:
        errors.append({"field": "page", "message": "Page must be at least 1"})
    if limit < 1:
        errors.append({"field": "limit", "message": "Limit must be at least 1"})
    if errors:
        raise ValidationError(errors)

    filters = []
    if genre:
        filters.append(Book.genre == genre)
    if author:
        filters.append(Book.author.ilike(like_pattern(author), escape="\\"))
    if search:
        pattern = like_pattern(search)
        filters.append(or_(
            Book.title.ilike(pattern, escape="\\"),
            Book.author.ilike(pattern, escape="\\"),
            Book.description.ilike(pattern, escape="\\"),
        ))

    skip = (page - 1) * limit
    ordering = resolve_sort(sort_by, order, BOOK_SORT_FIELDS, DEFAULT_BOOK_SORT)
    # El ID desempata para que las páginas sean estables
    tiebreak = asc(Book.id) if order == "asc" else desc(Book.id)

    stmt = select(Book).where(*filters).order_by(ordering, tiebreak).offset(skip).limit(limit)
    count_stmt = select(func.count()).select_from(Book).where(*filters)

    try:
        books = db.execute(stmt).scalars().all()
        total = db.execute(count_stmt).scalar_one()
    except SQLAlchemyError as e:
        logger.exception(f"Error listing books: {e}")
        raise InternalError(str(e)) from e

    return BookPage(
        books=[BookSchema.model_validate(book) for book in books],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


def get_book_by_id(db: Session, book_id: str) -> Optional[Book]:
    """
    Recupera un libro por su ID.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        book_id (str): ID del libro a recuperar.

    Returns:
        Optional[Book]: El objeto Book si se encuentra, None si no existe.
    """
    return db.get(Book, book_id)


def get_book_by_isbn(db: Session, isbn: str) -> Optional[Book]:
    """
    Recupera un libro por su ISBN.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        isbn (str): ISBN del libro a recuperar.

    Returns:
        Optional[Book]: El objeto Book si se encuentra, None si no existe.
    """
    stmt = select(Book).where(Book.isbn == isbn)
    result = db.execute(stmt)
    return result.scalars().first()


def get_book(db: Session, book_id: str) -> Book:
    """Como `get_book_by_id`, pero lanza NotFoundError si el libro no existe."""
    book = get_book_by_id(db, book_id)
    if book is None:
        logger.warning(f"Book {book_id} not found.")
        raise NotFoundError("Book not found")
    return book


def _commit_book(db: Session, book: Book, action: str) -> Book:
    isbn = book.isbn
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Duplicate ISBN '{isbn}' rejected on book {action}.")
        raise ConflictError(DUPLICATE_ISBN_MESSAGE) from e
    except SQLAlchemyError as e:
        logger.exception(f"Error committing book {action}: {e}")
        db.rollback()
        raise InternalError(str(e)) from e
    db.refresh(book)
    return book


def create_book(db: Session, book_in: BookCreate) -> Book:
    """
    Crea un libro nuevo con un ID generado.

    Args:
        db (Session): Sesión de base de datos SQLAlchemy.
        book_in (BookCreate): Datos ya validados del libro.

    Returns:
        Book: El libro creado, con agregados a 0.

    Raises:
        ConflictError: Si ya existe un libro con el mismo ISBN.
    """
    db_book = Book(**book_in.model_dump())
    db.add(db_book)
    _commit_book(db, db_book, "creation")
    logger.info(f"Book {db_book.id} created (isbn={db_book.isbn}).")
    return db_book


def update_book(db: Session, book_id: str, book_in: BookCreate) -> Book:
    """
    Reemplaza todos los campos editables de un libro.

    Los campos opcionales ausentes en `book_in` vuelven a su valor por defecto. Los
    agregados de valoración no se tocan.

    Raises:
        NotFoundError: Si el libro no existe.
        ConflictError: Si el nuevo ISBN ya pertenece a otro libro.
    """
    db_book = get_book(db, book_id)
    for field, value in book_in.model_dump().items():
        setattr(db_book, field, value)
    _commit_book(db, db_book, "update")
    logger.info(f"Book {book_id} updated.")
    return db_book


def delete_book(db: Session, book_id: str) -> int:
    """
    Borra un libro y, a continuación, todas sus reseñas.

    El libro se borra y se confirma primero; las reseñas se borran en una segunda
    transacción. Si el proceso cae entre ambas quedan reseñas huérfanas que ya no
    aparecen unidas a ningún libro.

    Returns:
        int: Número de reseñas borradas en cascada.

    Raises:
        NotFoundError: Si el libro no existe.
    """
    db_book = get_book(db, book_id)

    try:
        db.delete(db_book)
        db.commit()
        logger.info(f"Book {book_id} deleted.")

        result = db.execute(delete(Review).where(Review.book_id == book_id))
        db.commit()
    except SQLAlchemyError as e:
        logger.exception(f"Error deleting book {book_id} or its reviews: {e}")
        db.rollback()
        raise InternalError(str(e)) from e

    logger.info(f"Deleted {result.rowcount} reviews of book {book_id}.")
    return result.rowcount
