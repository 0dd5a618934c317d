"""
Esquemas Pydantic para la entidad Review en la API.
Define los modelos de entrada y salida para validación y serialización de reseñas.
"""

from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
import datetime
from typing import Optional

from .book import BookSummary, reject_bool

class ReviewCreate(BaseModel):
    """
    Esquema de entrada para crear o reemplazar una reseña.

    Atributos:
        book_id (str): ID del libro reseñado (clave `book` en la API).
        reviewer_name (str): Nombre de quien reseña, 2-100 caracteres.
        rating (int): Calificación entera entre 1 y 5.
        review_text (str): Texto de la reseña, 10-2000 caracteres.
        review_date (Optional[datetime.datetime]): Fecha de la reseña; si falta se usa la de creación.
        verified (bool): Si la reseña está verificada.

    `helpful` no se acepta en la entrada: solo cambia mediante `increment_helpful`.
    """
    book_id: str = Field(..., alias="book", pattern=r"^[0-9a-fA-F]{24}$")
    reviewer_name: str = Field(..., min_length=2, max_length=100)
    rating: int = Field(..., ge=1, le=5)
    review_text: str = Field(..., min_length=10, max_length=2000)
    review_date: Optional[datetime.datetime] = None
    verified: bool = False

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_validator("rating", mode="before")
    @classmethod
    def reject_boolean_rating(cls, value):
        return reject_bool(value)

    @field_validator("book_id")
    @classmethod
    def normalize_book_id(cls, value: str) -> str:
        return value.lower()

class ReviewSchema(BaseModel):
    """
    Esquema de salida para una reseña, con el título y autor de su libro.

    Atributos:
        book (Optional[BookSummary]): Libro reseñado; None si ya no existe.
    """
    id: str
    book: Optional[BookSummary] = None
    reviewer_name: str
    rating: int
    review_text: str
    review_date: datetime.datetime
    helpful: int
    verified: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)
