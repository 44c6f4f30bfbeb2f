"""Tests for CatalogService."""
from datetime import date
from decimal import Decimal

import pytest

from models import CatalogService, PublicationKind, StockDirection
from models.errors import (
    DuplicateIsbnError,
    DuplicateNameError,
    DuplicateTitleDateError,
    DuplicateTitleError,
    EmptyIsbnError,
    InsufficientStockError,
    InvalidIsbnFormatError,
    InvalidPageCountError,
    InvalidPriceError,
    InvalidQuantityError,
    InvalidStockError,
    MissingAuthorsError,
    MissingCategoryError,
    NotFoundError,
    StorageError,
    UnknownReferenceError,
)
from models.author import Author
from models.publisher import Publisher


class TestRegistration:
    def test_ids_increase_per_kind(self, service):
        first = service.register_author("Machado de Assis")
        second = service.register_author("Clarice Lispector")
        assert (first.id, second.id) == (1, 2)
        assert service.register_publisher("Rocco").id == 1

    @pytest.mark.parametrize(
        "register",
        [
            lambda s, n: s.register_author(n, "Brazilian", None),
            lambda s, n: s.register_publisher(n),
            lambda s, n: s.register_category(n),
        ],
    )
    def test_duplicate_names_differing_in_case(self, service, register):
        register(service, "Aurora")
        with pytest.raises(DuplicateNameError):
            register(service, "AURORA")

    def test_duplicate_name_keeps_store_size(self, service):
        service.register_category("Poetry")
        with pytest.raises(DuplicateNameError):
            service.register_category("poetry")
        assert len(service.list_categories()) == 1

    def test_book_and_newspaper_share_sequence(self, make_book, make_newspaper):
        book = make_book()
        paper = make_newspaper()
        assert paper.id == book.id + 1

    def test_register_book_wires_references(self, make_book, refs):
        book = make_book(authors=[refs["machado"], refs["clarice"], refs["machado"]])
        assert book.authors == [refs["machado"], refs["clarice"]]
        assert book.category is refs["novel"]
        assert book.publisher is refs["publisher"]
        assert book.price == Decimal("39.90")


class TestBookValidation:
    def test_price_boundary(self, make_book):
        with pytest.raises(InvalidPriceError):
            make_book(price=Decimal("14.99"))
        assert make_book(price=Decimal("15.00")).price == Decimal("15.00")

    def test_float_price_is_accepted(self, make_book):
        assert make_book(price=15.0).price == Decimal("15.0")

    def test_negative_stock(self, make_book):
        with pytest.raises(InvalidStockError):
            make_book(stock=-1)

    @pytest.mark.parametrize("stock", [2.5, True])
    def test_stock_must_be_a_whole_number(self, make_book, stock):
        with pytest.raises(InvalidStockError):
            make_book(stock=stock)

    def test_page_count_minimum(self, make_book):
        with pytest.raises(InvalidPageCountError):
            make_book(page_count=9)
        assert make_book(page_count=10).page_count == 10

    @pytest.mark.parametrize("isbn", ["", "   ", None])
    def test_empty_isbn(self, make_book, isbn):
        with pytest.raises(EmptyIsbnError):
            make_book(isbn=isbn)

    @pytest.mark.parametrize("isbn", ["9788535902771", "978-85-359-0277", "97A-85-359-0277-1", "978-85-359-0277-12"])
    def test_isbn_format(self, make_book, isbn):
        with pytest.raises(InvalidIsbnFormatError):
            make_book(isbn=isbn)

    def test_isbn_is_stripped(self, make_book):
        assert make_book(isbn="  978-85-359-0277-1 ").isbn == "978-85-359-0277-1"

    def test_validation_order_price_first(self, make_book):
        with pytest.raises(InvalidPriceError):
            make_book(price=1, stock=-1, page_count=1, isbn="bad")

    def test_requires_author_and_category(self, make_book):
        with pytest.raises(MissingAuthorsError):
            make_book(authors=[])
        with pytest.raises(MissingCategoryError):
            make_book(category=None)

    def test_authors_from_a_generator_are_kept(self, make_book, refs):
        book = make_book(authors=(a for a in [refs["machado"], refs["clarice"]]))
        assert book.authors == [refs["machado"], refs["clarice"]]

    def test_edit_with_generator_keeps_authors(self, service, make_book, refs):
        book = make_book()
        service.edit_book(
            book.id, book.title, book.price, book.stock, book.publisher, book.page_count, book.isbn,
            (a for a in [refs["clarice"]]), book.category,
        )
        assert book.authors == [refs["clarice"]]

    def test_unregistered_references(self, make_book):
        with pytest.raises(UnknownReferenceError):
            make_book(authors=[Author(id=99, name="Ghost")])
        with pytest.raises(UnknownReferenceError):
            make_book(publisher=Publisher(id=99, name="Ghost Press"))

    def test_publisher_is_optional(self, make_book):
        assert make_book(publisher=None).publisher is None

    def test_duplicate_title_and_isbn(self, make_book, service):
        make_book()
        with pytest.raises(DuplicateTitleError):
            make_book(title="DOM CASMURRO", isbn="111-11-111-1111-1")
        with pytest.raises(DuplicateIsbnError):
            make_book(title="Quincas Borba")
        assert len(service.list_books()) == 1


class TestEditBook:
    def _edit(self, service, book, **changes):
        values = dict(
            title=book.title,
            price=book.price,
            stock=book.stock,
            publisher=book.publisher,
            page_count=book.page_count,
            isbn=book.isbn,
            authors=list(book.authors),
            category=book.category,
        )
        values.update(changes)
        return service.edit_book(book.id, **values)

    def test_unknown_id(self, service, refs):
        with pytest.raises(NotFoundError):
            service.edit_book(
                42, "X", 20, 0, None, 100, "111-11-111-1111-1", [refs["machado"]], refs["novel"]
            )

    def test_keeping_own_title_and_isbn_succeeds(self, service, make_book):
        book = make_book()
        edited = self._edit(service, book, price=Decimal("45.00"))
        assert edited is book
        assert book.price == Decimal("45.00")

    def test_collision_with_another_book(self, service, make_book):
        a = make_book()
        b = make_book(title="Quincas Borba", isbn="222-22-222-2222-2")
        with pytest.raises(DuplicateTitleError):
            self._edit(service, a, title="quincas borba")
        with pytest.raises(DuplicateIsbnError):
            self._edit(service, a, isbn=b.isbn)
        assert a.title == "Dom Casmurro"
        assert a.isbn == "978-85-359-0277-1"

    def test_replaces_author_list(self, service, make_book, refs):
        book = make_book()
        self._edit(service, book, authors=[refs["clarice"]], category=refs["poetry"])
        assert book.authors == [refs["clarice"]]
        assert book.category is refs["poetry"]

    def test_failed_edit_leaves_book_untouched(self, service, make_book, refs):
        book = make_book()
        with pytest.raises(InvalidPageCountError):
            self._edit(service, book, title="Changed", authors=[refs["clarice"]], page_count=5)
        assert book.title == "Dom Casmurro"
        assert book.authors == [refs["machado"]]


class TestNewspapers:
    def test_price_minimum(self, make_newspaper):
        with pytest.raises(InvalidPriceError):
            make_newspaper(price=Decimal("2.99"))
        assert make_newspaper(price=Decimal("3.00")).price == Decimal("3.00")

    def test_negative_stock(self, make_newspaper):
        with pytest.raises(InvalidStockError):
            make_newspaper(stock=-5)

    def test_title_date_uniqueness(self, make_newspaper):
        make_newspaper()
        with pytest.raises(DuplicateTitleDateError):
            make_newspaper(title="FOLHA DA MANHÃ")
        # Same title on another day is a different edition
        assert make_newspaper(publication_date=date(2024, 3, 2)).id

    def test_edit_excludes_self(self, service, make_newspaper, refs):
        paper = make_newspaper()
        other = make_newspaper(publication_date=date(2024, 3, 2))
        service.edit_newspaper(paper.id, paper.title, Decimal("5.00"), 10, refs["publisher"], paper.publication_date)
        assert paper.price == Decimal("5.00")
        with pytest.raises(DuplicateTitleDateError):
            service.edit_newspaper(paper.id, paper.title, Decimal("5.00"), 10, None, other.publication_date)

    def test_edit_unknown_id(self, service):
        with pytest.raises(NotFoundError):
            service.edit_newspaper(7, "Gazeta", Decimal("4"), 1, None, date(2024, 1, 1))


class TestDelete:
    def test_delete_book(self, service, make_book):
        book = make_book()
        assert service.delete_book(book.id) is True
        assert service.find_book_by_id(book.id) is None
        assert service.delete_book(book.id) is False

    def test_delete_newspaper(self, service, make_newspaper):
        paper = make_newspaper()
        assert service.delete_newspaper(paper.id) is True
        assert service.delete_newspaper(paper.id) is False

    def test_delete_does_not_free_id(self, service, make_book):
        book = make_book()
        service.delete_book(book.id)
        assert make_book().id == book.id + 1


class TestAdjustStock:
    def test_add_and_remove(self, service, make_book):
        book = make_book(stock=2)
        service.adjust_stock(book.id, 3, PublicationKind.BOOK, StockDirection.ADD)
        service.adjust_stock(book.id, 4, PublicationKind.BOOK, StockDirection.REMOVE)
        assert book.stock == 1

    def test_remove_more_than_available(self, service, make_newspaper):
        paper = make_newspaper(stock=2)
        with pytest.raises(InsufficientStockError):
            service.adjust_stock(paper.id, 3, PublicationKind.NEWSPAPER, StockDirection.REMOVE)
        assert paper.stock == 2

    def test_negative_quantity(self, service, make_book):
        book = make_book(stock=2)
        with pytest.raises(InvalidQuantityError):
            service.adjust_stock(book.id, -1, PublicationKind.BOOK, StockDirection.ADD)
        assert book.stock == 2

    @pytest.mark.parametrize("quantity", [1.5, True])
    def test_fractional_or_bool_quantity(self, service, make_book, quantity):
        book = make_book(stock=1)
        with pytest.raises(InvalidQuantityError):
            service.adjust_stock(book.id, quantity, PublicationKind.BOOK, StockDirection.ADD)
        assert book.stock == 1

    def test_kind_selects_collection(self, service, make_book):
        book = make_book()
        with pytest.raises(NotFoundError):
            service.adjust_stock(book.id, 1, PublicationKind.NEWSPAPER, StockDirection.ADD)

    def test_accepts_string_values(self, service, make_book):
        book = make_book(stock=0)
        service.adjust_stock(book.id, 2, "BOOK", "ADD")
        assert book.stock == 2


class TestSearch:
    def test_title_search_is_case_insensitive_and_ordered(self, service, make_book):
        first = make_book(title="Memórias Póstumas de Brás Cubas", isbn="111-11-111-1111-1")
        make_book(title="Dom Casmurro", isbn="222-22-222-2222-2")
        third = make_book(title="Memorial de Aires", isbn="333-33-333-3333-3")
        assert service.search_books_by_title("MEMÓR") == [first]
        assert service.search_books_by_title("memor") == [third]
        assert service.search_books_by_title("mem") == [first, third]

    def test_search_by_author_and_category(self, service, make_book, refs):
        a = make_book()
        b = make_book(title="A Hora da Estrela", isbn="111-11-111-1111-1",
                      authors=[refs["clarice"]], category=refs["poetry"])
        assert service.search_books_by_author("lispector") == [b]
        assert service.search_books_by_author("a") == [a, b]
        assert service.search_books_by_category("NOV") == [a]

    def test_no_match_returns_empty_list(self, service, make_book):
        make_book()
        assert service.search_books_by_title("zzz") == []
        assert service.search_newspapers_by_title("zzz") == []

    def test_newspaper_searches(self, service, make_newspaper):
        a = make_newspaper()
        b = make_newspaper(title="Jornal do Brasil")
        c = make_newspaper(publication_date=date(2024, 3, 2))
        assert service.search_newspapers_by_title("folha") == [a, c]
        assert service.search_newspapers_by_date(date(2024, 3, 1)) == [a, b]


class TestListingsAndViews:
    def test_listings_are_copies(self, service, make_book):
        make_book()
        books = service.list_books()
        books.clear()
        assert len(service.list_books()) == 1

    def test_derived_views(self, service, make_book, make_newspaper, refs):
        book = make_book()
        paper = make_newspaper()
        other = make_book(title="Laços de Família", isbn="111-11-111-1111-1",
                          authors=[refs["clarice"]], publisher=None)
        assert service.books_by_author(refs["machado"]) == [book]
        assert service.books_by_author(refs["clarice"]) == [other]
        assert service.publications_by_publisher(refs["publisher"]) == [book, paper]

    def test_finders(self, service, refs):
        assert service.find_author_by_id(refs["machado"].id) is refs["machado"]
        assert service.find_publisher_by_id(refs["publisher"].id) is refs["publisher"]
        assert service.find_category_by_id(refs["poetry"].id) is refs["poetry"]
        assert service.find_author_by_id(999) is None


class TestPersistence:
    def test_round_trip(self, storage, make_book, make_newspaper, refs):
        book = make_book()
        paper = make_newspaper()

        reloaded = CatalogService(storage)

        [author] = [a for a in reloaded.list_authors() if a.id == refs["machado"].id]
        assert (author.name, author.nationality, author.birth_date) == (
            "Machado de Assis", "Brazilian", date(1839, 6, 21)
        )
        assert [p.name for p in reloaded.list_publishers()] == ["Companhia das Letras"]
        assert [c.name for c in reloaded.list_categories()] == ["Novel", "Poetry"]

        loaded_book = reloaded.find_book_by_id(book.id)
        assert loaded_book.title == book.title
        assert loaded_book.price == Decimal("39.90")
        assert loaded_book.stock == 5
        assert loaded_book.page_count == 256
        assert loaded_book.isbn == book.isbn
        assert [a.name for a in loaded_book.authors] == ["Machado de Assis"]
        assert loaded_book.authors[0] is author
        assert loaded_book.category.name == "Novel"
        assert loaded_book.publisher.name == "Companhia das Letras"

        loaded_paper = reloaded.find_newspaper_by_id(paper.id)
        assert loaded_paper.publication_date == date(2024, 3, 1)
        assert loaded_paper.price == Decimal("4.50")

        # New ids continue past the loaded ones
        assert reloaded.register_author("Lima Barreto").id == 3
        assert reloaded.register_category("Essay").id == 3
        new_paper = reloaded.register_newspaper("Gazeta", Decimal("3.50"), 1, None, date(2024, 1, 1))
        assert new_paper.id == paper.id + 1

    def test_save_failure_keeps_memory_state(self, service, storage, monkeypatch):
        def broken_save(collection, records):
            raise StorageError("disk full")

        monkeypatch.setattr(storage, "save", broken_save)
        author = service.register_author("Cecília Meireles")
        assert service.find_author_by_id(author.id) is author
        assert str(service.last_save_error) == "disk full"

        monkeypatch.undo()
        assert service.save_all() is True
        assert service.last_save_error is None

    def test_dangling_references_are_dropped(self, storage):
        storage.save("authors", [{"id": 4, "name": "Jorge Amado"}])
        storage.save("books", [{
            "id": 9, "title": "Capitães da Areia", "price": "25.00", "stock": 1,
            "publisher_id": 3, "page_count": 280, "isbn": "111-11-111-1111-1",
            "author_ids": [4, 5], "category_id": 8,
        }])
        service = CatalogService(storage)
        book = service.find_book_by_id(9)
        assert [a.id for a in book.authors] == [4]
        assert book.publisher is None
        assert book.category is None
        assert service.register_author("Rachel de Queiroz").id == 5


class RecordingStorage:
    """In-memory engine that remembers every save call."""

    def __init__(self):
        self.collections = {}
        self.saved = []

    def save(self, collection, records):
        self.saved.append(collection)
        self.collections[collection] = records

    def load(self, collection):
        return self.collections.get(collection, [])


ALL_COLLECTIONS = ["authors", "publishers", "categories", "books", "newspapers"]


class TestSaveCalls:
    @pytest.fixture
    def recording(self):
        return RecordingStorage()

    @pytest.fixture
    def catalog(self, recording):
        catalog = CatalogService(recording)
        author = catalog.register_author("Graciliano Ramos")
        category = catalog.register_category("Novel")
        catalog.register_book(
            "Vidas Secas", Decimal("29.90"), 3, None, 176, "978-85-010-1234-5", [author], category
        )
        recording.saved.clear()
        return catalog

    def test_each_mutation_saves_every_collection(self, catalog, recording):
        catalog.register_publisher("Record")
        assert recording.saved == ALL_COLLECTIONS

        recording.saved.clear()
        catalog.adjust_stock(1, 2, PublicationKind.BOOK, StockDirection.ADD)
        assert recording.saved == ALL_COLLECTIONS

    def test_delete_of_unknown_id_does_not_save(self, catalog, recording):
        assert catalog.delete_book(99) is False
        assert catalog.delete_newspaper(99) is False
        assert recording.saved == []

        assert catalog.delete_book(1) is True
        assert recording.saved == ALL_COLLECTIONS

    def test_rejected_mutation_does_not_save(self, catalog, recording):
        with pytest.raises(DuplicateNameError):
            catalog.register_category("NOVEL")
        with pytest.raises(InvalidQuantityError):
            catalog.adjust_stock(1, 0, PublicationKind.BOOK, StockDirection.ADD)
        assert recording.saved == []
