"""
Catalog domain package: entities, id allocation, the CatalogService and the
storage engines it persists through.
"""
from models.author import Author
from models.book import Book
from models.catalog_service import CatalogService
from models.category import Category
from models.db_storage import DBStorage
from models.file_storage import FileStorage
from models.id_allocator import EntityKind, IdAllocator
from models.newspaper import Newspaper
from models.publication import Publication, PublicationKind, StockDirection
from models.publisher import Publisher


def get_storage(storage_type: str = "file", data_dir: str = "data", database_url: str | None = None):
    """
    Build and initialize a storage engine.
    - "file": one JSON file per collection under data_dir
    - "db": SQLAlchemy table at database_url
    """
    storage_type = (storage_type or "file").lower()
    if storage_type == "db":
        storage = DBStorage(database_url or "sqlite:///catalog.db")
    elif storage_type == "file":
        storage = FileStorage(data_dir)
    else:
        raise ValueError(f"Unknown storage type: {storage_type!r} (expected 'file' or 'db')")
    storage.reload()
    return storage


__all__ = [
    "Author",
    "Book",
    "CatalogService",
    "Category",
    "DBStorage",
    "EntityKind",
    "FileStorage",
    "IdAllocator",
    "Newspaper",
    "Publication",
    "PublicationKind",
    "Publisher",
    "StockDirection",
    "get_storage",
]
