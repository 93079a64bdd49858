from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Generic error body (404, 409, 500)"""
    error: str


class ValidationErrorResponse(BaseModel):
    """422 body: one message per failing field"""
    error: dict[str, str]
