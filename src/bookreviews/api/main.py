"""
FastAPI application for the Book Reviews API.

`create_app` wires the routers, CORS and the error handlers; the lifespan
creates the schema on startup and closes the connection pool on shutdown.
Run it with the `bookreviews-api` console script or `python -m bookreviews.api.main`.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookreviews.api.errors import register_exception_handlers
from bookreviews.api.routers import books, reviews
from bookreviews.core.config import settings
from bookreviews.db.session import close_db, init_db

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Book Reviews API started ({settings.ENVIRONMENT}).")
    yield
    close_db()


def create_app() -> FastAPI:
    app = FastAPI(title="Book Reviews API", version=API_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.list_cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(books.router)
    app.include_router(reviews.router)

    @app.get("/")
    def root():
        return {
            "message": "Welcome to Book Review REST API",
            "version": API_VERSION,
            "endpoints": {
                "books": "/api/books",
                "reviews": "/api/reviews",
            },
        }

    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format='%(asctime)s - %(levelname)s - %(message)s',
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, reload=False)


if __name__ == "__main__":
    run()
