from __future__ import annotations

from datetime import date

from models.base_model import NamedModel


class Author(NamedModel):
    def __init__(self, id: int, name: str, nationality: str | None = None, birth_date: date | None = None):
        # The books an author appears on are derived from Book.authors
        # (see CatalogService.books_by_author); nothing is stored here.
        super().__init__(id=id, name=name, nationality=nationality, birth_date=birth_date)
