from marshmallow import ValidationError, fields


def non_blank(max_len: int):
    """Validator factory: stripped string must be non-empty and at most max_len chars."""

    def _validate(value: str) -> None:
        if not value or not value.strip():
            raise ValidationError("Must not be blank.")
        if len(value) > max_len:
            raise ValidationError(f"Must be at most {max_len} characters.")

    return _validate


def reference_id(obj_attr: str, **kwargs) -> fields.Function:
    """
    Dump the id of a referenced entity (or None), load a plain integer id.
    Used for publisher/category links stored by id in snapshot records.
    """

    def _serialize(obj):
        ref = getattr(obj, obj_attr, None)
        return ref.id if ref is not None else None

    def _deserialize(value):
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("Must be an integer id.")

    return fields.Function(serialize=_serialize, deserialize=_deserialize, allow_none=True, **kwargs)
