"""
Modelo ORM para la entidad Book en la base de datos.
Define los campos de un libro, incluidos los agregados derivados de sus reseñas.
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, func, CheckConstraint
from bookreviews.core.ids import new_object_id
from bookreviews.db.session import Base

class Book(Base):
    """
    Representa un libro en la base de datos.

    Atributos:
        id (str): Identificador con forma de ObjectId (24 caracteres hexadecimales).
        title (str): Título del libro.
        author (str): Autor del libro.
        isbn (str): ISBN-10 o ISBN-13 único del libro.
        publication_year (int): Año de publicación.
        genre (str): Género literario (uno de `schemas.book.Genre`).
        description (str): Descripción o sinopsis del libro.
        publisher (str): Editorial.
        pages (int): Número de páginas.
        language (str): Idioma, "English" por defecto.
        average_rating (float): Media de las valoraciones de sus reseñas, 0 sin reseñas.
        number_of_reviews (int): Número de reseñas que lo referencian.
        created_at (datetime): Fecha de creación.
        updated_at (datetime): Fecha de última actualización.

    Las reseñas se enlazan por referencia (`Review.book_id`); el borrado en cascada
    lo hace `crud_book.delete_book` de forma explícita, no el ORM.
    """
    __tablename__ = "books"

    id = Column(String(24), primary_key=True, default=new_object_id)
    title = Column(String(200), index=True, nullable=False)
    author = Column(String(100), index=True, nullable=False)
    isbn = Column(String(32), unique=True, index=True, nullable=False)
    publication_year = Column(Integer, nullable=False)
    genre = Column(String(50), index=True, nullable=False)
    description = Column(Text, nullable=True)
    publisher = Column(String(100), nullable=True)
    pages = Column(Integer, nullable=True)
    language = Column(String(50), nullable=False, default="English")
    average_rating = Column(Float, nullable=False, default=0, server_default="0")
    number_of_reviews = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint('average_rating >= 0 AND average_rating <= 5', name='book_average_rating_check'),
        CheckConstraint('number_of_reviews >= 0', name='book_number_of_reviews_check'),
    )

    def __repr__(self) -> str:
        """
        Representación legible del objeto Book para depuración.

        Returns:
            str: Cadena representando el libro.
        """
        return f"<Book(id={self.id}, title='{self.title[:30]}...', isbn='{self.isbn}')>"
