"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest

from utils.errors import ValidationError


def parse_json_request(
    req: Request,
    *,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error.

    With ``allow_empty`` a request without any body yields ``{}`` so that the
    caller can report which fields are missing.
    """

    if not req.get_data(cache=True):
        if allow_empty:
            return {}
        raise ValidationError("Request JSON body is required.")

    if not req.is_json:
        raise ValidationError("Request content type must be application/json.")

    try:
        data = req.get_json(silent=False)
    except BadRequest as exc:
        raise ValidationError("Request body is not valid JSON.") from exc
    if data is None:
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    return data


def require_fields(
    payload: dict,
    keys: Iterable[str],
    message: str,
    errors: dict | None = None,
) -> dict[str, str]:
    """Return the named string fields or raise one ValidationError.

    A field counts as missing when it is absent, falsy or only whitespace;
    any missing field produces the same ``message``/``errors`` pair. Values
    are returned as sent so that passwords keep their exact characters.
    """

    values: dict[str, str] = {}
    for key in keys:
        value = payload.get(key)
        if not value:
            raise ValidationError(message, errors=errors)
        if not isinstance(value, str):
            raise ValidationError(
                f"Invalid value for {key}.", errors={key: "Must be a string"}
            )
        if not value.strip():
            raise ValidationError(message, errors=errors)
        values[key] = value
    return values


def optional_text_fields(payload: dict, keys: Iterable[str]) -> dict[str, str]:
    """Return the provided string fields among ``keys``, stripped.

    Absent, ``null`` and blank values are left out.
    """

    values: dict[str, str] = {}
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValidationError(
                f"Invalid value for {key}.", errors={key: "Must be a string"}
            )
        value = value.strip()
        if value:
            values[key] = value
    return values
