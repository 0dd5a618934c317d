"""
Script para poblar la base de datos de la API de reseñas con datos falsos.

Uso:
    python scripts/generate_fake_data.py --books 40 --max-reviews 10 --seed 7

Requiere que el paquete esté instalado ('pip install -e .') y que DATABASE_URL
apunte a la base de datos deseada.
"""

import argparse
import logging
import sys

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from bookreviews.core.exceptions import BookReviewsError
from bookreviews.db.session import SessionLocal, init_db
from bookreviews.seed import (
    generate_data,
    NUM_FAKE_BOOKS,
    MIN_REVIEWS_PER_BOOK,
    MAX_REVIEWS_PER_BOOK,
)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Genera libros y reseñas falsas.")
    parser.add_argument("--books", type=int, default=NUM_FAKE_BOOKS)
    parser.add_argument("--min-reviews", type=int, default=MIN_REVIEWS_PER_BOOK)
    parser.add_argument("--max-reviews", type=int, default=MAX_REVIEWS_PER_BOOK)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    logger.info("=============================================")
    logger.info(" Iniciando script de generación de datos falsos")
    logger.info("=============================================")

    init_db()
    db = SessionLocal()
    try:
        books, reviews = generate_data(
            db,
            num_books=args.books,
            min_reviews=args.min_reviews,
            max_reviews=args.max_reviews,
            seed=args.seed,
        )
    except BookReviewsError as e:
        logger.error(f"La generación de datos falló: {e.message}")
        return 1
    finally:
        db.close()

    logger.info(f"Terminado: {books} libros y {reviews} reseñas creados.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
