"""Selectable items and the items-file format.

An item is anything the selector can list: a title, a secondary description,
an optional URL, and a JSON payload that is either inline or fetched later.
Pull-request shaped records get ``repo#N: title`` style labels.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path


@dataclass(frozen=True)
class SelectableItem:
    """One entry offered by the item selector.

    ``payload`` holds raw JSON bytes once known. Items created without one are
    fetched by the prefetch orchestrator, reading ``source_path`` by default.
    """

    identity: str
    title: str
    description: str = ""
    url: str = ""
    payload: bytes | None = None
    source_path: Path | None = None

    @property
    def filter_value(self) -> str:
        return f"{self.title} {self.description}"

    def with_payload(self, payload: bytes) -> SelectableItem:
        return replace(self, payload=payload)


def format_timestamp(raw: object) -> str:
    """Format an ISO-8601 timestamp as ``YYYY-MM-DD HH:MMZ`` in UTC.

    Missing or unparseable values render as ``unknown``.
    """
    if not isinstance(raw, str) or not raw.strip():
        return "unknown"
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return "unknown"
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%MZ")


def is_pull_request_record(raw: dict) -> bool:
    return "number" in raw and "repo" in raw


def pull_request_title(raw: dict) -> str:
    return f"{raw.get('repo', '')}#{raw.get('number', '')}: {raw.get('title', '')}"


def pull_request_description(raw: dict) -> str:
    updated = format_timestamp(raw.get("updated"))
    return (
        f"[{raw.get('head_ref', '')}→{raw.get('base_ref', '')}] "
        f"{updated} by @{raw.get('author', '')}"
    )


def item_from_mapping(raw: object, base_dir: Path, position: int = 0) -> SelectableItem:
    """Build one item from a decoded items-file record.

    Relative ``path`` values resolve against ``base_dir``. An inline
    ``payload`` may be any JSON value; it is re-encoded to bytes.
    Raises ``ValueError`` for records that are not objects or that carry
    neither ``payload`` nor ``path``.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"item {position}: expected an object, got {type(raw).__name__}")

    if is_pull_request_record(raw):
        title = pull_request_title(raw)
        description = pull_request_description(raw)
        identity = str(raw.get("id") or f"{raw['repo']}#{raw['number']}")
    else:
        title = str(raw.get("title") or raw.get("id") or f"item {position + 1}")
        description = str(raw.get("description") or "")
        identity = str(raw.get("id") or title)

    payload: bytes | None = None
    source_path: Path | None = None
    if "payload" in raw:
        payload = json.dumps(raw["payload"], ensure_ascii=False).encode("utf-8")
    elif raw.get("path"):
        source_path = Path(str(raw["path"])).expanduser()
        if not source_path.is_absolute():
            source_path = base_dir / source_path
    else:
        raise ValueError(f"item {position}: needs either 'payload' or 'path'")

    return SelectableItem(
        identity=identity,
        title=title,
        description=description,
        url=str(raw.get("url") or ""),
        payload=payload,
        source_path=source_path,
    )


def load_items_file(path: Path) -> list[SelectableItem]:
    """Load selectable items from a JSON file holding a list of records.

    Raises ``ValueError`` for unreadable or malformed files.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"cannot read items file {path}: {exc}") from exc
    except ValueError as exc:
        raise ValueError(f"items file {path} is not valid JSON: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        data = data["items"]
    if not isinstance(data, list):
        raise ValueError(f"items file {path} must contain a JSON list")
    base_dir = path.parent
    return [item_from_mapping(raw, base_dir, position) for position, raw in enumerate(data)]


def read_item_payload(item: SelectableItem, cancel_event: threading.Event) -> bytes:
    """Fetch an item's JSON payload from its ``source_path``.

    The bytes are validated as JSON so broken files surface as per-item
    prefetch failures instead of fatal explorer errors.
    """
    if item.payload is not None:
        return item.payload
    if item.source_path is None:
        raise ValueError(f"{item.title}: no payload source")
    if cancel_event.is_set():
        raise InterruptedError("prefetch cancelled")
    data = item.source_path.read_bytes()
    try:
        json.loads(data)
    except ValueError as exc:
        raise ValueError(f"{item.source_path}: invalid JSON: {exc}") from exc
    return data
