from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.category import CategoryCreateSchema, CategoryOutSchema
from .lookups import get_catalog, get_or_404

bp = Blueprint("categories", __name__)

create_schema = CategoryCreateSchema()
out_schema = CategoryOutSchema()
out_list_schema = CategoryOutSchema(many=True)


@bp.post("/categories")
def create_category():
    """
    Register a category
    ---
    tags: [Categories]
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
    responses:
      201: { description: Created }
      409: { description: Name already exists }
      422: { description: Validation error }
    """
    data = create_schema.load(request.get_json(silent=True) or {})
    category = get_catalog().register_category(data["name"])
    return jsonify({"data": out_schema.dump(category)}), 201


@bp.get("/categories")
def list_categories():
    """
    List categories in registration order
    ---
    tags: [Categories]
    responses:
      200: { description: OK }
    """
    rows = get_catalog().list_categories()
    return jsonify({"data": out_list_schema.dump(rows), "meta": {"total": len(rows)}})


@bp.get("/categories/<int:category_id>")
def get_category(category_id: int):
    """
    Get a category by id
    ---
    tags: [Categories]
    parameters:
      - in: path
        name: category_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    category = get_or_404(get_catalog().find_category_by_id, category_id, "Category")
    return jsonify({"data": out_schema.dump(category)})
