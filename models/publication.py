from __future__ import annotations

from decimal import Decimal
from enum import Enum

from models.base_model import BaseModel
from models.errors import InsufficientStockError, InvalidQuantityError
from models.publisher import Publisher


class PublicationKind(str, Enum):
    BOOK = "BOOK"
    NEWSPAPER = "NEWSPAPER"


class StockDirection(str, Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"


def is_count(value) -> bool:
    """True for plain integers; bools and floats are not unit counts."""
    return isinstance(value, int) and not isinstance(value, bool)


class Publication(BaseModel):
    """
    Common fields of books and newspapers: priced, stocked, published items.
    Both subclasses share the PUBLICATION id sequence.
    """

    publication_kind: PublicationKind

    def __init__(self, id: int, title: str, price: Decimal, stock: int = 0,
                 publisher: Publisher | None = None, **kwargs):
        super().__init__(id=id, title=title, price=price, stock=stock, publisher=publisher, **kwargs)

    def has_title(self, title: str) -> bool:
        return self.title.lower() == title.lower()

    def add_stock(self, quantity: int) -> int:
        """Add units to stock and return the new level."""
        if not is_count(quantity) or quantity <= 0:
            raise InvalidQuantityError("Quantity to add must be a whole number greater than zero.")
        self.stock += quantity
        return self.stock

    def remove_stock(self, quantity: int) -> int:
        """Remove units from stock and return the new level; stock never goes negative."""
        if not is_count(quantity) or quantity <= 0:
            raise InvalidQuantityError("Quantity to remove must be a whole number greater than zero.")
        if quantity > self.stock:
            raise InsufficientStockError(
                f"Cannot remove {quantity} units of '{self.title}'; current stock is {self.stock}."
            )
        self.stock -= quantity
        return self.stock
