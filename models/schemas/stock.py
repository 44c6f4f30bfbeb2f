from marshmallow import Schema, fields, post_load, pre_load
from marshmallow.validate import OneOf

from models.publication import StockDirection


class StockAdjustSchema(Schema):
    quantity = fields.Integer(required=True, strict=True)
    direction = fields.String(required=True, validate=OneOf([d.value for d in StockDirection]))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("direction"), str):
            data = {**data, "direction": data["direction"].strip().upper()}
        return data

    @post_load
    def to_enum(self, data, **kwargs):
        data["direction"] = StockDirection(data["direction"])
        return data
