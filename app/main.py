import logging

from fastapi import FastAPI
from app.database import build_engine, create_db_and_tables
from app.config import settings
from app.logging_config import setup_logging
from app.middleware.error_handler import register_exception_handlers
from app.middleware.request_logging import RequestLoggingMiddleware
from app.routes import (
    auth,
    books,
    genres,
    health,
    transactions,
)

from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    engine = build_engine(settings.database_url)
    app.state.engine = engine

    # Run DB creation ONLY in local, migrations own the schema elsewhere
    if settings.ENV == "local":
        create_db_and_tables(engine)

    logger.info(f"Bookstore API started (env={settings.ENV})")
    yield

    engine.dispose()
    logger.info("Bookstore API stopped")

app = FastAPI(title="IT Literature Shop API", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(books.router, prefix="/books", tags=["Books"])
app.include_router(genres.router, prefix="/genre", tags=["Genres"])
app.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {"message": "IT Literature Shop API is running!"}
