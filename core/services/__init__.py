"""Services: catalog models, repositories, database facade and money helpers."""
from .database import Database

__all__ = ["Database"]
