from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Bookshelf Service",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "books": "/v1/books",
    }
