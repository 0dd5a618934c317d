"""
Generación de datos falsos para la API de reseñas de libros.

Crea libros y reseñas de prueba con Faker a través de las funciones CRUD del
proyecto, de modo que los agregados de valoración quedan calculados igual que
con peticiones reales. Pensado para poblar entornos de desarrollo o pruebas.
"""

import datetime
import logging
import random
from typing import List, Optional, Tuple

from faker import Faker
from sqlalchemy.orm import Session

from bookreviews.core.exceptions import ConflictError
from bookreviews.crud.crud_book import create_book
from bookreviews.crud.crud_review import create_review
from bookreviews.schemas.book import BookCreate, Genre
from bookreviews.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)

NUM_FAKE_BOOKS: int = 25
MAX_REVIEWS_PER_BOOK: int = 8
MIN_REVIEWS_PER_BOOK: int = 0


def fake_book(fake: Faker) -> BookCreate:
    """Construye un libro aleatorio válido."""
    return BookCreate(
        title=fake.sentence(nb_words=4).rstrip("."),
        author=fake.name(),
        isbn=fake.isbn13(separator="-"),
        publication_year=random.randint(1900, datetime.date.today().year),
        genre=random.choice(list(Genre)),
        description=fake.paragraph(nb_sentences=3)[:1000],
        publisher=fake.company()[:100],
        pages=random.randint(80, 900),
    )


def fake_review(fake: Faker, book_id: str) -> ReviewCreate:
    """Construye una reseña aleatoria válida para el libro dado."""
    return ReviewCreate(
        book=book_id,
        reviewer_name=fake.name(),
        rating=random.randint(1, 5),
        review_text=fake.paragraph(nb_sentences=4)[:2000],
        verified=fake.boolean(chance_of_getting_true=30),
    )


def generate_data(
    db: Session,
    num_books: int = NUM_FAKE_BOOKS,
    min_reviews: int = MIN_REVIEWS_PER_BOOK,
    max_reviews: int = MAX_REVIEWS_PER_BOOK,
    seed: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Genera libros y reseñas falsas en la base de datos.

    Los ISBN repetidos que Faker pueda producir se descartan sin interrumpir el proceso.

    Args:
        db (Session): Sesión SQLAlchemy activa.
        num_books (int): Número de libros a intentar crear.
        min_reviews (int): Mínimo de reseñas por libro.
        max_reviews (int): Máximo de reseñas por libro.
        seed (Optional[int]): Semilla para obtener datos reproducibles.

    Returns:
        Tuple[int, int]: (libros creados, reseñas creadas).
    """
    fake = Faker('en_US')
    if seed is not None:
        Faker.seed(seed)
        random.seed(seed)

    book_ids: List[str] = []
    for _ in range(num_books):
        try:
            book = create_book(db, fake_book(fake))
        except ConflictError:
            logger.warning("ISBN falso duplicado, se omite el libro.")
            continue
        book_ids.append(book.id)

    reviews_created = 0
    for book_id in book_ids:
        for _ in range(random.randint(min_reviews, max_reviews)):
            create_review(db, fake_review(fake, book_id))
            reviews_created += 1

    logger.info(f"Datos falsos generados: {len(book_ids)} libros, {reviews_created} reseñas.")
    return len(book_ids), reviews_created
