"""
CatalogService: the only component that mutates the catalog.

Responsibilities:
- owns the five in-memory collections (authors, publishers, categories,
  books, newspapers) and hands out copies, never the live lists
- validates fields and detects duplicates before any mutation, so every
  public operation is applied fully or not at all
- allocates ids (books and newspapers share one sequence)
- saves every collection after each successful mutation

Persistence failures are logged and kept in `last_save_error`; they do not
undo the in-memory change, which stays authoritative for the running process.
"""
from __future__ import annotations

import logging
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence

from marshmallow import ValidationError

from models.author import Author
from models.book import Book
from models.category import Category
from models.errors import (
    DuplicateIsbnError,
    DuplicateNameError,
    DuplicateTitleDateError,
    DuplicateTitleError,
    EmptyIsbnError,
    InvalidIsbnFormatError,
    InvalidPageCountError,
    InvalidPriceError,
    InvalidStockError,
    MissingAuthorsError,
    MissingCategoryError,
    NotFoundError,
    StorageError,
    UnknownReferenceError,
)
from models.id_allocator import EntityKind, IdAllocator
from models.newspaper import Newspaper
from models.publication import Publication, PublicationKind, StockDirection, is_count
from models.publisher import Publisher
from models.schemas.records import COLLECTIONS

logger = logging.getLogger(__name__)

ISBN_PATTERN = re.compile(r"^\d{3}-\d{2}-\d{3}-\d{4}-\d$")

MIN_BOOK_PRICE = Decimal("15.00")
MIN_NEWSPAPER_PRICE = Decimal("3.00")
MIN_BOOK_PAGES = 10


def _to_decimal(value) -> Decimal:
    try:
        # str() first so floats like 14.99 keep their printed value
        price = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidPriceError(f"Invalid price: {value!r}.")
    if not price.is_finite():
        raise InvalidPriceError(f"Invalid price: {value!r}.")
    return price


class CatalogService:
    def __init__(self, storage, allocator: IdAllocator | None = None):
        """
        storage: any engine exposing save(collection, records) / load(collection).
        The collections are loaded immediately and the allocator fast-forwarded
        past every persisted id.
        """
        self.storage = storage
        self.allocator = allocator or IdAllocator()
        self.last_save_error: Optional[StorageError] = None
        self._authors: List[Author] = []
        self._publishers: List[Publisher] = []
        self._categories: List[Category] = []
        self._books: List[Book] = []
        self._newspapers: List[Newspaper] = []
        self.load()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load all collections, wire references by id and seed the id allocator."""
        authors = [Author(**r) for r in self._load_records("authors")]
        publishers = [Publisher(**r) for r in self._load_records("publishers")]
        categories = [Category(**r) for r in self._load_records("categories")]

        authors_by_id = {a.id: a for a in authors}
        publishers_by_id = {p.id: p for p in publishers}
        categories_by_id = {c.id: c for c in categories}

        books = []
        for r in self._load_records("books"):
            book_authors = []
            for author_id in r["author_ids"]:
                author = authors_by_id.get(author_id)
                if author is None:
                    logger.warning("Book %s references unknown author %s; dropping it", r["id"], author_id)
                    continue
                book_authors.append(author)
            books.append(
                Book(
                    id=r["id"],
                    title=r["title"],
                    price=r["price"],
                    stock=r["stock"],
                    publisher=self._resolve_loaded(publishers_by_id, r["publisher_id"], "Book", r["id"]),
                    page_count=r["page_count"],
                    isbn=r["isbn"],
                    authors=book_authors,
                    category=self._resolve_loaded(categories_by_id, r["category_id"], "Book", r["id"]),
                )
            )

        newspapers = [
            Newspaper(
                id=r["id"],
                title=r["title"],
                price=r["price"],
                stock=r["stock"],
                publisher=self._resolve_loaded(publishers_by_id, r["publisher_id"], "Newspaper", r["id"]),
                publication_date=r["publication_date"],
            )
            for r in self._load_records("newspapers")
        ]

        self._authors = authors
        self._publishers = publishers
        self._categories = categories
        self._books = books
        self._newspapers = newspapers

        self.allocator.fast_forward(EntityKind.AUTHOR, _max_id(authors) + 1)
        self.allocator.fast_forward(EntityKind.PUBLISHER, _max_id(publishers) + 1)
        self.allocator.fast_forward(EntityKind.CATEGORY, _max_id(categories) + 1)
        self.allocator.fast_forward(EntityKind.PUBLICATION, max(_max_id(books), _max_id(newspapers)) + 1)
        logger.info(
            "Catalog loaded from %s: %d author(s), %d publisher(s), %d category(ies), %d book(s), %d newspaper(s)",
            self.storage, len(authors), len(publishers), len(categories), len(books), len(newspapers),
        )

    def _load_records(self, collection: str) -> list:
        raw = self.storage.load(collection)
        try:
            return COLLECTIONS[collection].load(raw)
        except ValidationError as err:
            raise StorageError(f"Invalid {collection} records: {err.messages}") from err

    @staticmethod
    def _resolve_loaded(index: dict, ref_id, owner: str, owner_id: int):
        if ref_id is None:
            return None
        ref = index.get(ref_id)
        if ref is None:
            logger.warning("%s %s references unknown id %s; dropping the reference", owner, owner_id, ref_id)
        return ref

    def save_all(self) -> bool:
        """
        Save all five collections. Returns True on success; on failure the
        error is logged, kept in last_save_error and False is returned.
        """
        snapshot = {
            "authors": self._authors,
            "publishers": self._publishers,
            "categories": self._categories,
            "books": self._books,
            "newspapers": self._newspapers,
        }
        try:
            for collection, items in snapshot.items():
                self.storage.save(collection, COLLECTIONS[collection].dump(items))
        except StorageError as err:
            logger.exception("Saving the catalog failed; in-memory state is kept")
            self.last_save_error = err
            return False
        self.last_save_error = None
        return True

    # ------------------------------------------------------------------
    # Registration: authors, publishers, categories
    # ------------------------------------------------------------------

    def register_author(self, name: str, nationality: str | None = None, birth_date: date | None = None) -> Author:
        self._ensure_unique_name(self._authors, name, "Author")
        author = Author(
            id=self.allocator.next(EntityKind.AUTHOR), name=name, nationality=nationality, birth_date=birth_date
        )
        self._authors.append(author)
        logger.info("Registered author %s (%s)", author.id, author.name)
        self.save_all()
        return author

    def register_publisher(self, name: str) -> Publisher:
        self._ensure_unique_name(self._publishers, name, "Publisher")
        publisher = Publisher(id=self.allocator.next(EntityKind.PUBLISHER), name=name)
        self._publishers.append(publisher)
        logger.info("Registered publisher %s (%s)", publisher.id, publisher.name)
        self.save_all()
        return publisher

    def register_category(self, name: str) -> Category:
        self._ensure_unique_name(self._categories, name, "Category")
        category = Category(id=self.allocator.next(EntityKind.CATEGORY), name=name)
        self._categories.append(category)
        logger.info("Registered category %s (%s)", category.id, category.name)
        self.save_all()
        return category

    @staticmethod
    def _ensure_unique_name(items, name: str, label: str) -> None:
        if any(item.has_name(name) for item in items):
            raise DuplicateNameError(f"{label} with the name '{name}' already exists.")

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    def register_book(self, title: str, price, stock: int, publisher: Publisher | None, page_count: int,
                      isbn: str, authors: Sequence[Author], category: Category | None) -> Book:
        price, isbn, authors = self._validate_book(
            title, price, stock, publisher, page_count, isbn, authors, category, exclude=None
        )
        book = Book(
            id=self.allocator.next(EntityKind.PUBLICATION),
            title=title,
            price=price,
            stock=stock,
            publisher=publisher,
            page_count=page_count,
            isbn=isbn,
            authors=authors,
            category=category,
        )
        self._books.append(book)
        logger.info("Registered book %s (%s)", book.id, book.title)
        self.save_all()
        return book

    def edit_book(self, book_id: int, title: str, price, stock: int, publisher: Publisher | None,
                  page_count: int, isbn: str, authors: Sequence[Author], category: Category | None) -> Book:
        """Replace every field of a book, author list included. Raises NotFoundError for unknown ids."""
        book = self.find_book_by_id(book_id)
        if book is None:
            raise NotFoundError(f"Book {book_id} not found.")
        price, isbn, authors = self._validate_book(
            title, price, stock, publisher, page_count, isbn, authors, category, exclude=book
        )
        book.title = title
        book.price = price
        book.stock = stock
        book.publisher = publisher
        book.page_count = page_count
        book.isbn = isbn
        book.set_authors(authors)
        book.category = category
        logger.info("Edited book %s (%s)", book.id, book.title)
        self.save_all()
        return book

    def _validate_book(self, title, price, stock, publisher, page_count, isbn, authors, category, exclude):
        """Run every book rule in order; returns the normalized (price, isbn, authors)."""
        authors = list(authors or ())
        price = _to_decimal(price)
        if price < MIN_BOOK_PRICE:
            raise InvalidPriceError(f"Book price must be at least {MIN_BOOK_PRICE}.")
        if not is_count(stock) or stock < 0:
            raise InvalidStockError("Book stock must be a whole number, not negative.")
        if page_count < MIN_BOOK_PAGES:
            raise InvalidPageCountError(f"Book page count must be at least {MIN_BOOK_PAGES}.")
        if isbn is None or not isbn.strip():
            raise EmptyIsbnError("Book ISBN cannot be empty.")
        isbn = isbn.strip()
        if not ISBN_PATTERN.match(isbn):
            raise InvalidIsbnFormatError(f"Invalid ISBN '{isbn}'. Use the pattern XXX-XX-XXX-XXXX-X.")
        if not authors:
            raise MissingAuthorsError()
        if category is None:
            raise MissingCategoryError()
        self._ensure_registered(publisher, self._publishers, "Publisher")
        for author in authors:
            self._ensure_registered(author, self._authors, "Author")
        self._ensure_registered(category, self._categories, "Category")
        if any(b is not exclude and b.has_title(title) for b in self._books):
            raise DuplicateTitleError(f"Book with the title '{title}' already exists.")
        if any(b is not exclude and b.has_isbn(isbn) for b in self._books):
            raise DuplicateIsbnError(f"Book with the ISBN '{isbn}' already exists.")
        return price, isbn, authors

    def delete_book(self, book_id: int) -> bool:
        book = self.find_book_by_id(book_id)
        if book is None:
            return False
        self._books.remove(book)
        logger.info("Deleted book %s (%s)", book.id, book.title)
        self.save_all()
        return True

    # ------------------------------------------------------------------
    # Newspapers
    # ------------------------------------------------------------------

    def register_newspaper(self, title: str, price, stock: int, publisher: Publisher | None,
                           publication_date: date) -> Newspaper:
        price = self._validate_newspaper(title, price, stock, publisher, publication_date, exclude=None)
        newspaper = Newspaper(
            id=self.allocator.next(EntityKind.PUBLICATION),
            title=title,
            price=price,
            stock=stock,
            publisher=publisher,
            publication_date=publication_date,
        )
        self._newspapers.append(newspaper)
        logger.info("Registered newspaper %s (%s, %s)", newspaper.id, newspaper.title, publication_date)
        self.save_all()
        return newspaper

    def edit_newspaper(self, newspaper_id: int, title: str, price, stock: int, publisher: Publisher | None,
                       publication_date: date) -> Newspaper:
        newspaper = self.find_newspaper_by_id(newspaper_id)
        if newspaper is None:
            raise NotFoundError(f"Newspaper {newspaper_id} not found.")
        price = self._validate_newspaper(title, price, stock, publisher, publication_date, exclude=newspaper)
        newspaper.title = title
        newspaper.price = price
        newspaper.stock = stock
        newspaper.publisher = publisher
        newspaper.publication_date = publication_date
        logger.info("Edited newspaper %s (%s, %s)", newspaper.id, newspaper.title, publication_date)
        self.save_all()
        return newspaper

    def _validate_newspaper(self, title, price, stock, publisher, publication_date, exclude) -> Decimal:
        price = _to_decimal(price)
        if price < MIN_NEWSPAPER_PRICE:
            raise InvalidPriceError(f"Newspaper price must be at least {MIN_NEWSPAPER_PRICE}.")
        if not is_count(stock) or stock < 0:
            raise InvalidStockError("Newspaper stock must be a whole number, not negative.")
        self._ensure_registered(publisher, self._publishers, "Publisher")
        if any(n is not exclude and n.matches(title, publication_date) for n in self._newspapers):
            raise DuplicateTitleDateError(
                f"Newspaper with the title '{title}' and date '{publication_date}' already exists."
            )
        return price

    def delete_newspaper(self, newspaper_id: int) -> bool:
        newspaper = self.find_newspaper_by_id(newspaper_id)
        if newspaper is None:
            return False
        self._newspapers.remove(newspaper)
        logger.info("Deleted newspaper %s (%s)", newspaper.id, newspaper.title)
        self.save_all()
        return True

    @staticmethod
    def _ensure_registered(entity, items, label: str) -> None:
        # None is allowed here; required references are checked by the caller
        if entity is not None and not any(item is entity for item in items):
            raise UnknownReferenceError(f"{label} {getattr(entity, 'id', entity)} is not registered in this catalog.")

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def adjust_stock(self, publication_id: int, quantity: int, kind: PublicationKind,
                     direction: StockDirection) -> Publication:
        """Add or remove units; stock is unchanged on any failure."""
        kind = PublicationKind(kind)
        direction = StockDirection(direction)
        if kind is PublicationKind.BOOK:
            publication = self.find_book_by_id(publication_id)
        else:
            publication = self.find_newspaper_by_id(publication_id)
        if publication is None:
            raise NotFoundError(f"{kind.value.capitalize()} {publication_id} not found.")

        if direction is StockDirection.ADD:
            publication.add_stock(quantity)
        else:
            publication.remove_stock(quantity)
        logger.info(
            "Stock of %s %s: %s %d, now %d",
            kind.value.lower(), publication.id, direction.value.lower(), quantity, publication.stock,
        )
        self.save_all()
        return publication

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_book_by_id(self, book_id: int) -> Optional[Book]:
        return _find(self._books, book_id)

    def find_newspaper_by_id(self, newspaper_id: int) -> Optional[Newspaper]:
        return _find(self._newspapers, newspaper_id)

    def find_author_by_id(self, author_id: int) -> Optional[Author]:
        return _find(self._authors, author_id)

    def find_publisher_by_id(self, publisher_id: int) -> Optional[Publisher]:
        return _find(self._publishers, publisher_id)

    def find_category_by_id(self, category_id: int) -> Optional[Category]:
        return _find(self._categories, category_id)

    # ------------------------------------------------------------------
    # Searches (case-insensitive substring unless noted; insertion order)
    # ------------------------------------------------------------------

    def search_books_by_title(self, term: str) -> List[Book]:
        needle = term.lower()
        return [b for b in self._books if needle in b.title.lower()]

    def search_books_by_author(self, term: str) -> List[Book]:
        needle = term.lower()
        return [b for b in self._books if any(needle in a.name.lower() for a in b.authors)]

    def search_books_by_category(self, term: str) -> List[Book]:
        needle = term.lower()
        return [b for b in self._books if b.category is not None and needle in b.category.name.lower()]

    def search_newspapers_by_title(self, term: str) -> List[Newspaper]:
        needle = term.lower()
        return [n for n in self._newspapers if needle in n.title.lower()]

    def search_newspapers_by_date(self, day: date) -> List[Newspaper]:
        """Exact date match."""
        return [n for n in self._newspapers if n.publication_date == day]

    # ------------------------------------------------------------------
    # Listings (copies) and derived views
    # ------------------------------------------------------------------

    def list_books(self) -> List[Book]:
        return list(self._books)

    def list_newspapers(self) -> List[Newspaper]:
        return list(self._newspapers)

    def list_authors(self) -> List[Author]:
        return list(self._authors)

    def list_publishers(self) -> List[Publisher]:
        return list(self._publishers)

    def list_categories(self) -> List[Category]:
        return list(self._categories)

    def books_by_author(self, author: Author) -> List[Book]:
        return [b for b in self._books if author in b.authors]

    def publications_by_publisher(self, publisher: Publisher) -> List[Publication]:
        """Books first, then newspapers, each in insertion order."""
        publications: List[Publication] = [b for b in self._books if b.publisher is publisher]
        publications.extend(n for n in self._newspapers if n.publisher is publisher)
        return publications


def _find(items: Iterable, entity_id: int):
    return next((item for item in items if item.id == entity_id), None)


def _max_id(items: Iterable) -> int:
    return max((item.id for item in items), default=0)
