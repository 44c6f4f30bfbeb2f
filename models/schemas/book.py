from marshmallow import Schema, fields

from models.schemas.common import non_blank
from models.schemas.records import BookRecordSchema


class BookCreateSchema(Schema):
    title = fields.String(required=True, validate=non_blank(255))
    # Business minimums (price, pages, ISBN pattern) are enforced by CatalogService
    price = fields.Decimal(required=True)
    stock = fields.Integer(strict=True, load_default=0)
    publisher_id = fields.Integer(strict=True, allow_none=True, load_default=None)
    page_count = fields.Integer(strict=True, required=True)
    isbn = fields.String(required=True)
    author_ids = fields.List(fields.Integer(strict=True), required=True)
    category_id = fields.Integer(strict=True, required=True, allow_none=True)


class BookUpdateSchema(BookCreateSchema):
    # PUT replaces every field, so nothing falls back to a default
    stock = fields.Integer(strict=True, required=True)
    publisher_id = fields.Integer(strict=True, required=True, allow_none=True)


class BookOutSchema(BookRecordSchema):
    kind = fields.Constant("BOOK")
    publisher_name = fields.Function(lambda b: b.publisher.name if b.publisher else None)
    author_names = fields.Function(lambda b: [a.name for a in b.authors])
    category_name = fields.Function(lambda b: b.category.name if b.category else None)
