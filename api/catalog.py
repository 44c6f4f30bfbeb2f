from flask import Blueprint, jsonify

from models.schemas.book import BookOutSchema
from models.schemas.newspaper import NewspaperOutSchema
from .lookups import get_catalog

bp = Blueprint("catalog", __name__)

books_out_schema = BookOutSchema(many=True)
newspapers_out_schema = NewspaperOutSchema(many=True)


@bp.get("/catalog")
def full_catalog():
    """
    Every book and newspaper in one listing
    ---
    tags:
      - Catalog
    responses:
      200:
        description: Books first, then newspapers, each in registration order
    """
    catalog = get_catalog()
    books = catalog.list_books()
    newspapers = catalog.list_newspapers()
    return jsonify(
        {
            "data": books_out_schema.dump(books) + newspapers_out_schema.dump(newspapers),
            "meta": {"books": len(books), "newspapers": len(newspapers), "total": len(books) + len(newspapers)},
        }
    )
