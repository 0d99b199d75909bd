from .base import EntryFilter, EntryPage
from .entries import EntryRepository

__all__ = ["EntryFilter", "EntryPage", "EntryRepository"]
