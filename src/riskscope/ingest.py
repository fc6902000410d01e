"""Load normalised finding documents into the Finding tagged union.

Only a missing or unknown ``category`` and a missing ``id`` reject a finding.
Any other field that fails validation is dropped with a warning so the
calculator default applies.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from riskscope.errors import MalformedFindingError
from riskscope.models import Category, Finding

logger = logging.getLogger(__name__)

_finding_adapter: TypeAdapter[Finding] = TypeAdapter(Finding)

REQUIRED_FIELDS = frozenset({"id", "category"})


def parse_finding(raw: Any, index: int | None = None) -> Finding:
    if not isinstance(raw, dict):
        raise MalformedFindingError(f"expected an object, got {type(raw).__name__}", index)

    category = raw.get("category")
    if not category:
        raise MalformedFindingError("missing category", index)
    if not isinstance(category, str) or category not in Category._value2member_map_:
        raise MalformedFindingError(f"unknown category {category!r}", index)
    if not raw.get("id"):
        raise MalformedFindingError("missing id", index)

    data = dict(raw)
    while True:
        try:
            return _finding_adapter.validate_python(data)
        except ValidationError as exc:
            invalid = _invalid_fields(exc)
            if not invalid or REQUIRED_FIELDS & invalid.keys() or not invalid.keys() <= data.keys():
                raise MalformedFindingError(_first_error(exc), index) from exc
            for field, msg in invalid.items():
                logger.warning(
                    "Finding %s: ignoring invalid %s=%r (%s)", data["id"], field, data[field], msg
                )
                del data[field]


def parse_findings(data: Any) -> list[Finding]:
    """Validate a list of raw findings, or a document with a ``findings`` key."""
    if isinstance(data, dict):
        data = data.get("findings", [])
    if not isinstance(data, list):
        raise MalformedFindingError("expected a list of findings")

    findings = [parse_finding(raw, i) for i, raw in enumerate(data)]
    logger.debug("Parsed %d finding(s)", len(findings))
    return findings


def load_findings(path: Path) -> list[Finding]:
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise MalformedFindingError(f"{path}: invalid JSON ({exc})") from exc
    return parse_findings(data)


def _invalid_fields(exc: ValidationError) -> dict[str, str]:
    """Top-level field name -> first error message (loc[0] is the category tag)."""
    fields: dict[str, str] = {}
    for err in exc.errors():
        if len(err["loc"]) > 1:
            fields.setdefault(str(err["loc"][1]), err["msg"])
    return fields


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"][1:]) or "finding"
    return f"{loc}: {err['msg']}"
