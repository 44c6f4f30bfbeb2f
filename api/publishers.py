from __future__ import annotations

from flask import Blueprint, request, jsonify

from models import PublicationKind
from models.schemas.book import BookOutSchema
from models.schemas.newspaper import NewspaperOutSchema
from models.schemas.publisher import PublisherCreateSchema, PublisherOutSchema
from .lookups import get_catalog, get_or_404

bp = Blueprint("publishers", __name__)

create_schema = PublisherCreateSchema()
out_schema = PublisherOutSchema()
out_list_schema = PublisherOutSchema(many=True)
book_out_schema = BookOutSchema()
newspaper_out_schema = NewspaperOutSchema()


@bp.post("/publishers")
def create_publisher():
    """
    Register a publisher
    ---
    tags: [Publishers]
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 128 }
    responses:
      201: { description: Created }
      409: { description: Name already exists }
      422: { description: Validation error }
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    publisher = get_catalog().register_publisher(data["name"])
    return jsonify({"data": out_schema.dump(publisher)}), 201


@bp.get("/publishers")
def list_publishers():
    """
    List publishers in registration order
    ---
    tags: [Publishers]
    responses:
      200: { description: OK }
    """
    rows = get_catalog().list_publishers()
    return jsonify({"data": out_list_schema.dump(rows), "meta": {"total": len(rows)}})


@bp.get("/publishers/<int:publisher_id>")
def get_publisher(publisher_id: int):
    """
    Get a publisher by id
    ---
    tags: [Publishers]
    parameters:
      - in: path
        name: publisher_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    publisher = get_or_404(get_catalog().find_publisher_by_id, publisher_id, "Publisher")
    return jsonify({"data": out_schema.dump(publisher)})


@bp.get("/publishers/<int:publisher_id>/publications")
def list_publisher_publications(publisher_id: int):
    """
    Books and newspapers published by a publisher
    ---
    tags: [Publishers]
    parameters:
      - in: path
        name: publisher_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    catalog = get_catalog()
    publisher = get_or_404(catalog.find_publisher_by_id, publisher_id, "Publisher")
    rows = [
        book_out_schema.dump(p) if p.publication_kind is PublicationKind.BOOK else newspaper_out_schema.dump(p)
        for p in catalog.publications_by_publisher(publisher)
    ]
    return jsonify({"data": rows, "meta": {"total": len(rows), "publisher_id": publisher_id}})
