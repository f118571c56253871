"""FastAPI routers acting as controllers in the MVC architecture."""

from . import auth, transcriptions

__all__ = ["auth", "transcriptions"]
