from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from models.author import Author
from models.category import Category
from models.publication import Publication, PublicationKind
from models.publisher import Publisher


class Book(Publication):
    publication_kind = PublicationKind.BOOK

    def __init__(self, id: int, title: str, price: Decimal, stock: int = 0,
                 publisher: Publisher | None = None, page_count: int = 0, isbn: str = "",
                 authors: Iterable[Author] = (), category: Category | None = None):
        super().__init__(id=id, title=title, price=price, stock=stock, publisher=publisher,
                         page_count=page_count, isbn=isbn, category=category)
        self.authors: List[Author] = []
        self.set_authors(authors)

    def add_author(self, author: Author) -> None:
        # Ordered set: keep first occurrence only
        if author is not None and author not in self.authors:
            self.authors.append(author)

    def remove_author(self, author: Author) -> None:
        if author in self.authors:
            self.authors.remove(author)

    def set_authors(self, authors: Iterable[Author]) -> None:
        """Replace the author list (never merges)."""
        self.authors = []
        for author in authors:
            self.add_author(author)

    def has_isbn(self, isbn: str) -> bool:
        return self.isbn.lower() == isbn.lower()
