"""Default fields merged into every entry of a logger or request context."""

import copy
from collections.abc import Mapping
from typing import Any, Dict, Optional


class DefaultFields:
    """
    Owned store of default fields.

    Values are deep-copied on the way in and on the way out, so neither the
    caller's object nor any collected snapshot ever aliases the store.
    """

    def __init__(self, fields: Optional[Mapping] = None):
        self._fields: Dict[str, Any] = {}
        if fields:
            self.add(fields)

    def add(self, fields: Mapping) -> None:
        """
        Merge a snapshot of ``fields`` into the store.

        Later keys overwrite earlier keys with the same name.

        Raises:
            TypeError: If ``fields`` is not a mapping
        """
        if not isinstance(fields, Mapping):
            raise TypeError(
                f"default fields must be a mapping, got {type(fields).__name__}"
            )
        self._fields.update(copy.deepcopy(dict(fields)))

    def collect(self) -> Dict[str, Any]:
        return copy.deepcopy(self._fields)

    def copy(self) -> "DefaultFields":
        clone = DefaultFields()
        clone._fields = self.collect()
        return clone

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._fields
