from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Blueprint, request, jsonify, abort

from models import PublicationKind
from models.schemas.newspaper import NewspaperCreateSchema, NewspaperUpdateSchema, NewspaperOutSchema
from models.schemas.stock import StockAdjustSchema
from .lookups import get_catalog, get_or_404, resolve_publisher

bp = Blueprint("newspapers", __name__)

create_schema = NewspaperCreateSchema()
update_schema = NewspaperUpdateSchema()
out_schema = NewspaperOutSchema()
out_list_schema = NewspaperOutSchema(many=True)
stock_schema = StockAdjustSchema()


def parse_date_param(name: str) -> Optional[date]:
    val = request.args.get(name)
    if not val:
        return None
    try:
        return date.fromisoformat(val)
    except ValueError:
        abort(400, description=f"Invalid date format for {name}. Use YYYY-MM-DD")


def newspaper_arguments(data: dict) -> dict:
    return dict(
        title=data["title"],
        price=data["price"],
        stock=data["stock"],
        publisher=resolve_publisher(data["publisher_id"]),
        publication_date=data["publication_date"],
    )


@bp.post("/newspapers")
def create_newspaper():
    """
    Register a newspaper edition
    ---
    tags: [Newspapers]
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string, maxLength: 255 }
            price: { type: string, example: "4.50", description: "minimum 3.00" }
            stock: { type: integer, minimum: 0, default: 0 }
            publisher_id: { type: integer }
            publication_date: { type: string, format: date }
    responses:
      201: { description: Created }
      404: { description: Publisher not found }
      409: { description: Same title and date already registered }
      422: { description: Validation error }
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    newspaper = get_catalog().register_newspaper(**newspaper_arguments(data))
    return jsonify({"data": out_schema.dump(newspaper)}), 201


@bp.get("/newspapers")
def list_newspapers():
    """
    List newspapers, optionally searching by title and/or exact date
    ---
    tags: [Newspapers]
    parameters:
      - in: query
        name: title
        type: string
        description: "Case-insensitive substring of the title"
      - in: query
        name: date
        type: string
        format: date
        description: "Exact publication date (YYYY-MM-DD)"
    responses:
      200: { description: List of newspapers in registration order }
    """
    catalog = get_catalog()
    rows = catalog.list_newspapers()
    title = request.args.get("title")
    if title is not None:
        matches = catalog.search_newspapers_by_title(title)
        rows = [n for n in rows if n in matches]
    day = parse_date_param("date")
    if day is not None:
        matches = catalog.search_newspapers_by_date(day)
        rows = [n for n in rows if n in matches]
    return jsonify(
        {
            "data": out_list_schema.dump(rows),
            "meta": {
                "total": len(rows),
                "filters": {k: v for k, v in request.args.items() if k in ("title", "date")},
            },
        }
    )


@bp.get("/newspapers/<int:newspaper_id>")
def get_newspaper(newspaper_id: int):
    """
    Get a newspaper by id
    ---
    tags: [Newspapers]
    parameters:
      - in: path
        name: newspaper_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    newspaper = get_or_404(get_catalog().find_newspaper_by_id, newspaper_id, "Newspaper")
    return jsonify({"data": out_schema.dump(newspaper)})


@bp.put("/newspapers/<int:newspaper_id>")
def update_newspaper(newspaper_id: int):
    """
    Replace every field of a newspaper
    ---
    tags: [Newspapers]
    parameters:
      - in: path
        name: newspaper_id
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
    responses:
      200: { description: Updated }
      404: { description: Newspaper or publisher not found }
      409: { description: Same title and date already registered }
      422: { description: Validation error }
    """
    catalog = get_catalog()
    get_or_404(catalog.find_newspaper_by_id, newspaper_id, "Newspaper")
    data = update_schema.load(request.get_json(silent=True) or {})
    newspaper = catalog.edit_newspaper(newspaper_id, **newspaper_arguments(data))
    return jsonify({"data": out_schema.dump(newspaper)})


@bp.delete("/newspapers/<int:newspaper_id>")
def delete_newspaper(newspaper_id: int):
    """
    Delete a newspaper
    ---
    tags: [Newspapers]
    parameters:
      - in: path
        name: newspaper_id
        type: integer
        required: true
    responses:
      204: { description: Deleted }
      404: { description: Not found }
    """
    if not get_catalog().delete_newspaper(newspaper_id):
        abort(404, description=f"Newspaper {newspaper_id} not found")
    return ("", 204)


@bp.post("/newspapers/<int:newspaper_id>/stock")
def adjust_newspaper_stock(newspaper_id: int):
    """
    Add units to or remove units from a newspaper's stock
    ---
    tags: [Newspapers]
    parameters:
      - in: path
        name: newspaper_id
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
      200: { description: Stock updated }
      404: { description: Not found }
      409: { description: Not enough stock to remove }
      422: { description: Invalid quantity }
    """
    data = stock_schema.load(request.get_json(silent=True) or {})
    newspaper = get_catalog().adjust_stock(
        newspaper_id, data["quantity"], PublicationKind.NEWSPAPER, data["direction"]
    )
    return jsonify({"data": out_schema.dump(newspaper)})
