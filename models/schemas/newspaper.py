from marshmallow import Schema, fields

from models.schemas.common import non_blank
from models.schemas.records import NewspaperRecordSchema


class NewspaperCreateSchema(Schema):
    title = fields.String(required=True, validate=non_blank(255))
    price = fields.Decimal(required=True)
    stock = fields.Integer(strict=True, load_default=0)
    publisher_id = fields.Integer(strict=True, allow_none=True, load_default=None)
    publication_date = fields.Date(required=True)


class NewspaperUpdateSchema(NewspaperCreateSchema):
    stock = fields.Integer(strict=True, required=True)
    publisher_id = fields.Integer(strict=True, required=True, allow_none=True)


class NewspaperOutSchema(NewspaperRecordSchema):
    kind = fields.Constant("NEWSPAPER")
    publisher_name = fields.Function(lambda n: n.publisher.name if n.publisher else None)
