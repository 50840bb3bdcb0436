"""
Request identifier chains.

A chain is the causal path of a request: ancestor identifiers first, the
identifier of the current hop last. Chains are immutable; spawning a child
returns a new chain and never touches the parent.

Wire format: identifiers joined by ``:`` followed by a trailing ``:``.
"""

import uuid
from dataclasses import dataclass
from typing import Callable, Iterable, Tuple


UID_SEPARATOR = ":"


def generate_uid() -> str:
    """Return a new random identifier (32 hex characters)."""
    return uuid.uuid4().hex


def serialize_uids(uids: Iterable[str]) -> str:
    """Join ``uids`` with the separator and append a trailing separator."""
    return "".join(f"{uid}{UID_SEPARATOR}" for uid in uids)


def deserialize_uids(serialized: str) -> Tuple[str, ...]:
    """
    Parse a serialized chain.

    Empty segments, such as the one produced by the trailing separator, are
    not identifiers and are dropped. Input without the trailing separator is
    accepted as well.
    """
    return tuple(part for part in serialized.split(UID_SEPARATOR) if part)


@dataclass(frozen=True)
class RequestChain:
    """
    Immutable ordered sequence of request identifiers.

    Attributes:
        uids: Identifiers in causal order, the last one being this hop's own
    """
    uids: Tuple[str, ...]

    @classmethod
    def create(
        cls,
        parent: Iterable[str] = (),
        generate_id: Callable[[], str] = generate_uid,
    ) -> "RequestChain":
        """Copy ``parent`` and append one newly generated identifier."""
        return cls(tuple(parent) + (generate_id(),))

    @classmethod
    def from_serialized(
        cls,
        serialized: str,
        generate_id: Callable[[], str] = generate_uid,
    ) -> "RequestChain":
        """
        Restore a chain from its wire format.

        The restored identifiers are used as-is. When parsing yields no
        identifier at all, one is generated so the chain is never empty.
        """
        uids = deserialize_uids(serialized)
        if not uids:
            uids = (generate_id(),)
        return cls(uids)

    def child(self, generate_id: Callable[[], str] = generate_uid) -> "RequestChain":
        return RequestChain.create(self.uids, generate_id)

    @property
    def own_uid(self) -> str:
        return self.uids[-1]

    def serialize(self) -> str:
        return serialize_uids(self.uids)

    def req_id(self) -> str:
        """Chain rendered for the ``req_id`` entry field (no trailing separator)."""
        return UID_SEPARATOR.join(self.uids)

    def __len__(self) -> int:
        return len(self.uids)
