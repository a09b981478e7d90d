"""Persisted selection bound to one attribute of a state store."""

from typing import Any

from ..dates import UNSET
from ..logging import get_logger
from ..store import QueryStateModel
from . import StateListener

logger = get_logger(__name__)

DEFAULT_STATE = {"from": UNSET, "to": UNSET, "radio": UNSET}


class PersistedRange:
    """The ``<filter id>:rangePicker`` attribute of a state store."""

    def __init__(self, store: QueryStateModel, filter_id: str):
        """Register the attribute with an all-unset default.

        Args:
            store: Shared state store (URL-backed or persistent)
            filter_id: Filter identifier used to name the attribute
        """
        self.store = store
        self.attribute = f"{filter_id}:rangePicker"
        self._listeners: list[StateListener] = []
        store.register_attribute(self.attribute, DEFAULT_STATE)
        store.subscribe(self.attribute, self._dispatch)

    def get(self) -> dict[str, Any]:
        value = self.store.get(self.attribute)
        return value if isinstance(value, dict) else {"raw": value}

    def set(self, value: dict[str, Any], silent: bool = False) -> None:
        # A silent write still reaches other subscribers of the store
        changed = self.store.set(self.attribute, value, exclude=self._dispatch if silent else None)
        logger.debug("persisted_state_written", attribute=self.attribute, changed=changed, silent=silent)

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def _dispatch(self, value: Any) -> None:
        payload = value if isinstance(value, dict) else {"raw": value}
        for listener in list(self._listeners):
            listener(payload)
