"""ORM models used by the application infrastructure."""

from .blob import BlobModel

__all__ = ["BlobModel"]
