"""
Recalcula averageRating y numberOfReviews de todos los libros.

Repara agregados que quedaron desfasados si el proceso se interrumpió entre la
escritura de una reseña y el recálculo de su libro.

Uso:
    python scripts/recalculate_ratings.py
"""

import logging
import sys

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

from bookreviews.core.exceptions import InternalError
from bookreviews.db.session import SessionLocal
from bookreviews.services.ratings import recalculate_all_book_ratings


def main() -> int:
    db = SessionLocal()
    try:
        updated = recalculate_all_book_ratings(db)
    except InternalError as e:
        logger.error(f"No se pudieron recalcular las valoraciones: {e.message}")
        return 1
    finally:
        db.close()

    logger.info(f"Valoraciones recalculadas para {updated} libros.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
