from pydantic import BaseModel
from typing import Optional, Any


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    error: str
    code: str
    details: Optional[Any] = None


class MessageResponse(BaseModel):
    """
    Confirmation returned by write endpoints that have nothing else to return.
    """
    message: str
    count: Optional[int] = None
