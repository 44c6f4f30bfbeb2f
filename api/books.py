from __future__ import annotations

from flask import Blueprint, request, jsonify, abort

from models import PublicationKind
from models.schemas.book import BookCreateSchema, BookUpdateSchema, BookOutSchema
from models.schemas.stock import StockAdjustSchema
from .lookups import get_catalog, get_or_404, resolve_authors, resolve_category, resolve_publisher

bp = Blueprint("books", __name__)

# Schemas
book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_out_schema = BookOutSchema()
books_out_schema = BookOutSchema(many=True)
stock_schema = StockAdjustSchema()

# Query param -> CatalogService search method name
SEARCHES = {
    "title": "search_books_by_title",
    "author": "search_books_by_author",
    "category": "search_books_by_category",
}


def apply_filters(catalog):
    # Each given filter narrows the previous result; storage order is kept
    rows = catalog.list_books()
    for param, method in SEARCHES.items():
        term = request.args.get(param)
        if term is None:
            continue
        matches = getattr(catalog, method)(term)
        rows = [b for b in rows if b in matches]
    return rows


def book_arguments(data: dict) -> dict:
    """Resolve referenced ids into entities for the service call."""
    return dict(
        title=data["title"],
        price=data["price"],
        stock=data["stock"],
        publisher=resolve_publisher(data["publisher_id"]),
        page_count=data["page_count"],
        isbn=data["isbn"],
        authors=resolve_authors(data["author_ids"]),
        category=resolve_category(data["category_id"]),
    )


@bp.post("/books")
def create_book():
    """
    Register a new book
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string, maxLength: 255 }
            price: { type: string, example: "39.90", description: "minimum 15.00" }
            stock: { type: integer, minimum: 0, default: 0 }
            publisher_id: { type: integer }
            page_count: { type: integer, minimum: 10 }
            isbn: { type: string, example: "978-85-333-0227-3" }
            author_ids:
              type: array
              items: { type: integer }
            category_id: { type: integer }
    responses:
      201:
        description: Created
      404:
        description: A referenced publisher, author or category does not exist
      409:
        description: Title or ISBN already used by another book
      422:
        description: Validation error
    """
    data = book_create_schema.load(request.get_json(silent=True) or {})
    book = get_catalog().register_book(**book_arguments(data))
    return jsonify({"data": book_out_schema.dump(book)}), 201


@bp.get("/books")
def list_books():
    """
    List books, optionally searching by title, author name or category name
    ---
    tags:
      - Books
    parameters:
      - in: query
        name: title
        type: string
        description: "Case-insensitive substring of the title"
      - in: query
        name: author
        type: string
        description: "Case-insensitive substring of any author's name"
      - in: query
        name: category
        type: string
        description: "Case-insensitive substring of the category name"
    responses:
      200:
        description: List of books in registration order
    """
    rows = apply_filters(get_catalog())
    return jsonify(
        {
            "data": books_out_schema.dump(rows),
            "meta": {
                "total": len(rows),
                "filters": {k: v for k, v in request.args.items() if k in SEARCHES},
            },
        }
    )


@bp.get("/books/<int:book_id>")
def get_book(book_id: int):
    """
    Get a single book by id
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
    responses:
      200:
        description: Book found
      404:
        description: Not found
    """
    book = get_or_404(get_catalog().find_book_by_id, book_id, "Book")
    return jsonify({"data": book_out_schema.dump(book)})


@bp.put("/books/<int:book_id>")
def update_book(book_id: int):
    """
    Replace every field of a book (author list included)
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200:
        description: Updated
      404:
        description: Book or a referenced entity not found
      409:
        description: Title or ISBN already used by another book
      422:
        description: Validation error
    """
    catalog = get_catalog()
    get_or_404(catalog.find_book_by_id, book_id, "Book")
    data = book_update_schema.load(request.get_json(silent=True) or {})
    book = catalog.edit_book(book_id, **book_arguments(data))
    return jsonify({"data": book_out_schema.dump(book)})


@bp.delete("/books/<int:book_id>")
def delete_book(book_id: int):
    """
    Delete a book
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
    responses:
      204:
        description: Deleted
      404:
        description: Not found
    """
    if not get_catalog().delete_book(book_id):
        abort(404, description=f"Book {book_id} not found")
    return ("", 204)


@bp.post("/books/<int:book_id>/stock")
def adjust_book_stock(book_id: int):
    """
    Add units to or remove units from a book's stock
    ---
    tags:
      - Books
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            quantity: { type: integer, minimum: 1 }
            direction:
              type: string
              enum: [ADD, REMOVE]
    responses:
      200:
        description: Stock updated
      404:
        description: Not found
      409:
        description: Not enough stock to remove
      422:
        description: Invalid quantity
    """
    data = stock_schema.load(request.get_json(silent=True) or {})
    book = get_catalog().adjust_stock(book_id, data["quantity"], PublicationKind.BOOK, data["direction"])
    return jsonify({"data": book_out_schema.dump(book)})
