from __future__ import annotations

from src.services.store import StoreReader


class BaseService:
    """
    Base class for read services.

    Holds the StoreReader that supplies source collections; subclasses derive
    their views from what it returns and never open sessions themselves.
    """

    def __init__(self, reader: StoreReader) -> None:
        self.reader = reader
