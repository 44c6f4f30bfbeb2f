from marshmallow import Schema, fields

from models.schemas.common import non_blank
from models.schemas.records import CategoryRecordSchema


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=non_blank(64))


class CategoryOutSchema(CategoryRecordSchema):
    pass
