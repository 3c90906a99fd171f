"""Storage backends for minigit objects."""
from .object_store import ObjectStore

__all__ = ["ObjectStore"]
