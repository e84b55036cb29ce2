"""Import file decoding: CSV and JSON into candidate records.

CSV handling is a plain comma split with one layer of surrounding quotes
removed; quoted fields containing commas are not supported.
"""

import json
import uuid
from collections.abc import Sequence
from typing import Any

from loguru import logger

from community_api.lib.tech_import.types import CandidateRecord, ExistingTech, ImportParseError
from community_api.lib.tech_import.validator import revalidate

SUPPORTED_SUFFIXES: tuple[str, ...] = (".csv", ".json")

_IMG_URL_COLUMNS = ("imgurl", "img_url")


def new_temp_id() -> str:
    """Return a session-unique temporary record identifier."""
    return f"temp-{uuid.uuid4().hex}"


def _candidate(label: Any, slug: Any, img_url: Any) -> CandidateRecord:
    return CandidateRecord(
        temp_id=new_temp_id(),
        label=str(label),
        slug=str(slug),
        img_url=str(img_url),
    )


def _unquote(value: str) -> str:
    value = value.strip()
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def parse_csv(text: str) -> list[CandidateRecord]:
    """Decode delimited text into pending candidate records.

    Args:
        text: Raw file content. The first non-blank line is the header.

    Returns:
        One pending record per non-blank data line, in file order.

    Raises:
        ImportParseError: If the header lacks ``label`` or an image column.
    """
    lines = [line for line in text.split("\n") if line.strip()]
    headers = [h.strip().lower() for h in lines[0].split(",")] if lines else []

    label_idx = headers.index("label") if "label" in headers else None
    slug_idx = headers.index("slug") if "slug" in headers else None
    img_idx = next((headers.index(c) for c in _IMG_URL_COLUMNS if c in headers), None)

    if label_idx is None or img_idx is None:
        msg = 'CSV must contain "label" and "imgUrl" columns'
        raise ImportParseError(msg)

    def cell(values: list[str], idx: int | None) -> str:
        if idx is None or idx >= len(values):
            return ""
        return values[idx]

    records = []
    for line in lines[1:]:
        values = [_unquote(v) for v in line.split(",")]
        records.append(_candidate(cell(values, label_idx), cell(values, slug_idx), cell(values, img_idx)))
    return records


def _first_truthy(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return ""


def parse_json(text: str) -> list[CandidateRecord]:
    """Decode a JSON object or array of objects into pending candidate records.

    Field fallbacks: label ``label`` → ``name``; image ``imgUrl`` →
    ``img_url`` → ``imageUrl``; slug ``slug``.

    Raises:
        ImportParseError: If the payload is not valid JSON, or is not an
            object / array of objects.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = "Invalid JSON format"
        raise ImportParseError(msg) from e

    items = data if isinstance(data, list) else [data]
    if not all(isinstance(item, dict) for item in items):
        msg = "Invalid JSON format"
        raise ImportParseError(msg)

    return [
        _candidate(
            _first_truthy(item, "label", "name"),
            _first_truthy(item, "slug"),
            _first_truthy(item, "imgUrl", "img_url", "imageUrl"),
        )
        for item in items
    ]


def parse_import_file(
    filename: str,
    content: str,
    existing: Sequence[ExistingTech],
) -> list[CandidateRecord]:
    """Decode an import file and validate every row.

    Args:
        filename: Original file name; its suffix selects the decoder.
        content: Decoded text content.
        existing: Snapshot of committed techs for duplicate detection.

    Returns:
        Validated records with status ``valid``, ``invalid`` or ``duplicate``.

    Raises:
        ImportParseError: For unsupported file types or undecodable content.
    """
    if filename.endswith(".csv"):
        pending = parse_csv(content)
    elif filename.endswith(".json"):
        pending = parse_json(content)
    else:
        msg = "Please upload a CSV or JSON file"
        raise ImportParseError(msg)

    records = [revalidate(record, pending, existing) for record in pending]
    logger.info(f"Parsed {len(records)} tech stack records from {filename}")
    return records
