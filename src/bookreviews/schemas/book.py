"""
Esquemas Pydantic para la entidad Book en la API.
Define los modelos de entrada (validación) y salida (serialización) de libros y del
listado paginado. Los nombres públicos van en camelCase (`publicationYear`), pero la
entrada también acepta los nombres de atributo (`publication_year`).
"""

import datetime
import enum
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ISBN-10 o ISBN-13, con o sin prefijo "ISBN", guiones o espacios
ISBN_PATTERN = re.compile(
    r"^(?:ISBN(?:-1[03])?:? )?"
    r"(?=[0-9X]{10}$|(?=(?:[0-9]+[- ]){3})[- 0-9X]{13}$|97[89][0-9]{10}$|(?=(?:[0-9]+[- ]){4})[- 0-9]{17}$)"
    r"(?:97[89][- ]?)?[0-9]{1,5}[- ]?[0-9]+[- ]?[0-9]+[- ]?[0-9X]$"
)

MIN_PUBLICATION_YEAR = 1000


def reject_bool(value):
    """Los campos enteros no aceptan true/false, aunque Pydantic los convertiría a 1/0."""
    if isinstance(value, bool):
        raise ValueError("Input should be a valid integer")
    return value


class Genre(str, enum.Enum):
    """Géneros admitidos para un libro."""
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SCIENCE_FICTION = "Science Fiction"
    FANTASY = "Fantasy"
    MYSTERY = "Mystery"
    THRILLER = "Thriller"
    ROMANCE = "Romance"
    HORROR = "Horror"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SCIENCE = "Science"
    SELF_HELP = "Self-Help"
    OTHER = "Other"


class BookCreate(BaseModel):
    """
    Esquema de entrada para crear o reemplazar un libro.

    Atributos:
        title (str): Título, 1-200 caracteres.
        author (str): Autor, 1-100 caracteres.
        isbn (str): ISBN-10 o ISBN-13.
        publication_year (int): Entre 1000 y el año en curso.
        genre (Genre): Uno de los géneros fijos.
        description (Optional[str]): Hasta 1000 caracteres.
        publisher (Optional[str]): Hasta 100 caracteres.
        pages (Optional[int]): Al menos 1.
        language (str): "English" por defecto.

    `averageRating` y `numberOfReviews` no forman parte de la entrada: si llegan se ignoran.
    """
    title: str = Field(..., min_length=1, max_length=200)
    author: str = Field(..., min_length=1, max_length=100)
    isbn: str
    publication_year: int = Field(..., ge=MIN_PUBLICATION_YEAR)
    genre: Genre
    description: Optional[str] = Field(None, max_length=1000)
    publisher: Optional[str] = Field(None, max_length=100)
    pages: Optional[int] = Field(None, ge=1)
    language: str = "English"

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        extra="ignore",
    )

    @field_validator("publication_year", "pages", mode="before")
    @classmethod
    def reject_booleans(cls, value):
        return reject_bool(value)

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, value: str) -> str:
        if not ISBN_PATTERN.match(value):
            raise ValueError(f"{value} is not a valid ISBN!")
        return value

    @field_validator("publication_year")
    @classmethod
    def check_not_in_future(cls, value: int) -> int:
        # Se evalúa en cada validación para no fijar el año al importar el módulo
        if value > datetime.date.today().year:
            raise ValueError("Publication year cannot be in the future")
        return value

    @field_validator("language")
    @classmethod
    def default_blank_language(cls, value: str) -> str:
        return value or "English"


class BookSummary(BaseModel):
    """Datos del libro que se adjuntan a cada reseña."""
    id: str
    title: str
    author: str

    model_config = ConfigDict(from_attributes=True)


class BookSchema(BaseModel):
    """
    Esquema de salida para un libro, con sus agregados y marcas de tiempo.
    """
    id: str
    title: str
    author: str
    isbn: str
    publication_year: int
    genre: str
    description: Optional[str] = None
    publisher: Optional[str] = None
    pages: Optional[int] = None
    language: str
    average_rating: float
    number_of_reviews: int
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class BookPage(BaseModel):
    """Una página del listado de libros junto con los datos de paginación."""
    books: List[BookSchema]
    pagination: Pagination
