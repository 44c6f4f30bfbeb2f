from marshmallow import Schema, fields

from models.schemas.common import non_blank
from models.schemas.records import AuthorRecordSchema


class AuthorCreateSchema(Schema):
    name = fields.String(required=True, validate=non_blank(128))
    nationality = fields.String(allow_none=True, load_default=None, validate=non_blank(64))
    birth_date = fields.Date(allow_none=True, load_default=None)


class AuthorOutSchema(AuthorRecordSchema):
    pass
