from __future__ import annotations

import csv
import io
import logging
from typing import Any, Iterable, Optional, Sequence

from flask import Flask, jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DataAccessError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (DataAccessError, 502),
)


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def payload() -> dict:
    """JSON body of the request, or form fields for multipart posts."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def optional_date(value: Optional[str]):
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def csv_response(app: Flask, *, fieldnames: Sequence[str], rows: Iterable[dict], filename: str):
    """Write rows to a CSV download (UTF-8 with BOM so spreadsheets detect it)."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames))
    writer.writeheader()
    for row in rows:
        writer.writerow(row)

    return app.response_class(
        out.getvalue().encode("utf-8-sig"),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def register_error_handlers(app: Flask) -> None:
    def _handle(e: DomainError):
        status = 400
        for error_type, code in _STATUS_BY_ERROR:
            if isinstance(e, error_type):
                status = code
                break
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e)
        return jsonify({"success": False, "message": str(e)}), status

    app.register_error_handler(DomainError, _handle)
