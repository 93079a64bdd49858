from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookshelf.api.books import router as books_router
from bookshelf.api.error_handlers import register_exception_handlers
from bookshelf.api.health import router as health_router
from bookshelf.api.root import router as root_router
from bookshelf.core.config import settings
from bookshelf.core.logging import setup_logging

setup_logging(settings.LOG_LEVEL)

app = FastAPI(title="Bookshelf")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(books_router)
