from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response


def _payload(source):
    if source == "query":
        return request.args.to_dict()
    body = request.get_json(silent=True)
    if body is None:
        return {}
    return body


def validate_schema(schema, source="json"):
    """Validate the JSON body (or the query string) against a pydantic schema.

    The parsed model is left on ``request.validated_data``. A body that is not
    a JSON object fails validation like any other bad field.
    """

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            data = _payload(source)
            if not isinstance(data, dict):
                return validation_error_response(
                    [{"loc": ("body",), "msg": "Request body must be a JSON object"}]
                )
            try:
                obj = schema(**data)
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
