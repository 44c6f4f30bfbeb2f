from marshmallow import Schema, fields

from models.schemas.common import non_blank
from models.schemas.records import PublisherRecordSchema


class PublisherCreateSchema(Schema):
    name = fields.String(required=True, validate=non_blank(128))


class PublisherOutSchema(PublisherRecordSchema):
    pass
