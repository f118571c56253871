"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    code: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str
