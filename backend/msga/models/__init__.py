"""SQLAlchemy models exposed for metadata creation and imports."""
from .collection import Collection

__all__ = ["Collection"]
