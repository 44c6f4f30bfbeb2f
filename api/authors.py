from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.author import AuthorCreateSchema, AuthorOutSchema
from models.schemas.book import BookOutSchema
from .lookups import get_catalog, get_or_404

bp = Blueprint("authors", __name__)

create_schema = AuthorCreateSchema()
out_schema = AuthorOutSchema()
out_list_schema = AuthorOutSchema(many=True)
books_out_schema = BookOutSchema(many=True)


@bp.post("/authors")
def create_author():
    """
    Register an author
    ---
    tags: [Authors]
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 128 }
            nationality: { type: string }
            birth_date: { type: string, format: date }
    responses:
      201: { description: Created }
      409: { description: Name already exists (case-insensitive) }
      422: { description: Validation error }
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    author = get_catalog().register_author(data["name"], data["nationality"], data["birth_date"])
    return jsonify({"data": out_schema.dump(author)}), 201


@bp.get("/authors")
def list_authors():
    """
    List authors in registration order
    ---
    tags: [Authors]
    responses:
      200: { description: OK }
    """
    rows = get_catalog().list_authors()
    return jsonify({"data": out_list_schema.dump(rows), "meta": {"total": len(rows)}})


@bp.get("/authors/<int:author_id>")
def get_author(author_id: int):
    """
    Get an author by id
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    author = get_or_404(get_catalog().find_author_by_id, author_id, "Author")
    return jsonify({"data": out_schema.dump(author)})


@bp.get("/authors/<int:author_id>/books")
def list_author_books(author_id: int):
    """
    Books the author appears on
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    catalog = get_catalog()
    author = get_or_404(catalog.find_author_by_id, author_id, "Author")
    rows = catalog.books_by_author(author)
    return jsonify({"data": books_out_schema.dump(rows), "meta": {"total": len(rows), "author_id": author_id}})
