"""Named-attribute state store backing the shareable filter state.

``QueryStateModel`` holds registered attributes with defaults and notifies
per-attribute subscribers whenever a value actually changes, whatever the
origin (a widget, URL navigation). ``SqliteStateStore`` adds write-through
persistence so state survives a restart.
"""

import copy
import json
import sqlite3
from collections import defaultdict
from collections.abc import Callable
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator
from urllib.parse import parse_qsl, quote, urlencode

from .logging import get_logger

logger = get_logger(__name__)

AttributeListener = Callable[[Any], None]


class QueryStateModel:
    """In-memory store of named attributes with change-one notifications."""

    def __init__(self) -> None:
        self._defaults: dict[str, Any] = {}
        self._values: dict[str, Any] = {}
        self._listeners: dict[str, list[AttributeListener]] = defaultdict(list)

    def register_attribute(self, name: str, default: Any) -> None:
        """Declare an attribute; an already-set value is kept."""
        self._defaults[name] = copy.deepcopy(default)
        self._values.setdefault(name, copy.deepcopy(default))

    @property
    def attributes(self) -> list[str]:
        return list(self._defaults)

    def get(self, name: str) -> Any:
        """Copy of the attribute's current value.

        Raises:
            KeyError: If the attribute was never registered
        """
        if name not in self._defaults:
            raise KeyError(f"Unknown attribute: {name}")
        return copy.deepcopy(self._values[name])

    def get_default(self, name: str) -> Any:
        return copy.deepcopy(self._defaults[name])

    def set(self, name: str, value: Any, exclude: AttributeListener | None = None) -> bool:
        """Set an attribute and notify its subscribers if it changed.

        Args:
            name: Registered attribute name
            value: New value (JSON-compatible)
            exclude: Subscriber to skip for this write

        Returns:
            True if the value changed
        """
        if name not in self._defaults:
            raise KeyError(f"Unknown attribute: {name}")
        if self._values[name] == value:
            return False
        self._values[name] = copy.deepcopy(value)
        self._on_write(name, value)
        logger.debug("state_attribute_changed", attribute=name, value=value)
        for listener in list(self._listeners[name]):
            if listener != exclude:
                listener(copy.deepcopy(value))
        return True

    def reset(self, name: str) -> bool:
        return self.set(name, self.get_default(name))

    def subscribe(self, name: str, listener: AttributeListener) -> None:
        self._listeners[name].append(listener)

    def unsubscribe(self, name: str, listener: AttributeListener) -> None:
        if listener in self._listeners[name]:
            self._listeners[name].remove(listener)

    def _on_write(self, name: str, value: Any) -> None:
        """Hook for persistent subclasses."""

    # URL fragment
    def to_fragment(self) -> str:
        """Encode non-default attributes as a URL hash (without ``#``)."""
        pairs = [
            (name, json.dumps(value, separators=(",", ":"), sort_keys=True))
            for name, value in self._values.items()
            if value != self._defaults[name]
        ]
        return urlencode(pairs, quote_via=quote, safe=":")

    def apply_fragment(self, fragment: str) -> list[str]:
        """Apply a URL hash as navigation would.

        Registered attributes missing from the fragment revert to their
        defaults. Unknown keys are ignored. Values that are not valid JSON are
        stored as raw strings for the consumer to validate.

        Returns:
            Names of the attributes that changed
        """
        incoming: dict[str, Any] = {}
        for name, raw in parse_qsl(fragment.lstrip("#"), keep_blank_values=True):
            if name not in self._defaults:
                logger.debug("fragment_attribute_ignored", attribute=name)
                continue
            try:
                incoming[name] = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("fragment_value_not_json", attribute=name, value=raw)
                incoming[name] = raw

        changed = []
        for name in self._defaults:
            value = incoming.get(name, self.get_default(name))
            if self.set(name, value):
                changed.append(name)
        return changed


class SqliteStateStore(QueryStateModel):
    """State store whose attributes are written through to SQLite."""

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file
        """
        super().__init__()
        self.db_path = db_path
        self._ensure_db_exists()
        self._create_tables()

    def _ensure_db_exists(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _create_tables(self) -> None:
        with self._get_connection() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS query_state (
                    name TEXT PRIMARY KEY,
                    value_json TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );
            """)
            conn.commit()

    def register_attribute(self, name: str, default: Any) -> None:
        """Declare an attribute, restoring its stored value if there is one."""
        super().register_attribute(name, default)
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value_json FROM query_state WHERE name = ?",
                (name,),
            ).fetchone()
        if row:
            try:
                self._values[name] = json.loads(row["value_json"])
            except json.JSONDecodeError:
                logger.warning("stored_state_not_json", attribute=name)

    def _on_write(self, name: str, value: Any) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO query_state (name, value_json, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (name, json.dumps(value, default=str)),
            )
            conn.commit()

    def clear_all(self) -> None:
        """Delete all stored attributes and revert to defaults silently."""
        with self._get_connection() as conn:
            conn.execute("DELETE FROM query_state")
            conn.commit()
        for name in self._defaults:
            self._values[name] = self.get_default(name)
