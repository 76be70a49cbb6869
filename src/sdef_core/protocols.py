"""Protocols for callers that observe an open dictionary."""

from typing import Protocol, runtime_checkable

from sdef_core.models.dictionary import Document


@runtime_checkable
class DocumentObserver(Protocol):
    """Callback invoked after a new document is published."""

    def __call__(self, document: Document) -> None:
        """Receive the newly published document."""
        ...
