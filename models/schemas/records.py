"""
Snapshot records used by the storage engines.

Each schema dumps a live entity to a flat, JSON-compatible dict (references
become ids) and loads such a dict back into plain values. Rebuilding entities
and wiring references is done by the CatalogService, which knows the other
collections.
"""
from marshmallow import Schema, fields, ValidationError

from models.schemas.common import reference_id


class AuthorRecordSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)
    nationality = fields.String(allow_none=True, load_default=None)
    birth_date = fields.Date(allow_none=True, load_default=None)


class PublisherRecordSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)


class CategoryRecordSchema(Schema):
    id = fields.Integer(required=True)
    name = fields.String(required=True)


class PublicationRecordSchema(Schema):
    id = fields.Integer(required=True)
    title = fields.String(required=True)
    price = fields.Decimal(as_string=True, required=True)
    stock = fields.Integer(load_default=0)
    publisher_id = reference_id("publisher", load_default=None)


def _author_ids(book):
    return [a.id for a in book.authors]


def _load_author_ids(value):
    if not isinstance(value, list):
        raise ValidationError("author_ids must be a list.")
    try:
        return [int(v) for v in value]
    except (TypeError, ValueError):
        raise ValidationError("author_ids must contain integer ids.")


class BookRecordSchema(PublicationRecordSchema):
    page_count = fields.Integer(required=True)
    isbn = fields.String(required=True)
    author_ids = fields.Function(serialize=_author_ids, deserialize=_load_author_ids, load_default=list)
    category_id = reference_id("category", load_default=None)


class NewspaperRecordSchema(PublicationRecordSchema):
    publication_date = fields.Date(required=True)


# Collection name -> schema (many=True) used for save/load
COLLECTIONS = {
    "authors": AuthorRecordSchema(many=True),
    "publishers": PublisherRecordSchema(many=True),
    "categories": CategoryRecordSchema(many=True),
    "books": BookRecordSchema(many=True),
    "newspapers": NewspaperRecordSchema(many=True),
}
