from __future__ import annotations

from datetime import date
from decimal import Decimal

from models.publication import Publication, PublicationKind
from models.publisher import Publisher


class Newspaper(Publication):
    publication_kind = PublicationKind.NEWSPAPER

    def __init__(self, id: int, title: str, price: Decimal, stock: int = 0,
                 publisher: Publisher | None = None, publication_date: date | None = None):
        super().__init__(id=id, title=title, price=price, stock=stock, publisher=publisher,
                         publication_date=publication_date)

    def matches(self, title: str, publication_date: date) -> bool:
        """Same edition: title (case-insensitive) and exact date."""
        return self.has_title(title) and self.publication_date == publication_date
