"""An open dictionary: parse into a buffer, then publish it to observers."""

import threading
from collections.abc import Callable

from loguru import logger

from sdef_core.config import DEFAULT_TITLE, NEW_SUITE_NAME
from sdef_core.core.parser.sdef_reader import parse
from sdef_core.core.writer.sdef_writer import render
from sdef_core.models.dictionary import Document, add_suite
from sdef_core.protocols import DocumentObserver


class DictionarySession:
    """Hold the document of one open SDEF file.

    Readers only ever see a complete Document: new content is built off to
    the side and swapped in as a whole. Observers are called after each swap,
    outside the lock, with the document that was published.
    """

    def __init__(self, document: Document | None = None) -> None:
        self._document = document if document is not None else Document()
        self._lock = threading.Lock()
        self._observers: list[DocumentObserver] = []

    @property
    def document(self) -> Document:
        with self._lock:
            return self._document

    def subscribe(self, observer: DocumentObserver) -> Callable[[], None]:
        """Register an observer. Returns a callable that removes it again."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def _publish(self, update: Callable[[Document], Document]) -> Document:
        with self._lock:
            document = update(self._document)
            self._document = document
            observers = list(self._observers)
        for observer in observers:
            observer(document)
        return document

    def load(self, data: bytes) -> Document:
        """Parse raw SDEF bytes and publish the result.

        On failure the currently published document is left untouched.

        Raises:
            ParseError: The bytes could not be decoded or parsed.
        """
        buffer = parse(data)
        logger.debug("Publishing document with {} suites", len(buffer.suites))
        return self._publish(lambda _current: buffer)

    def add_suite(self, name: str = NEW_SUITE_NAME, code: str | None = None) -> Document:
        """Append an empty suite and publish the new document."""
        return self._publish(lambda current: add_suite(current, name=name, code=code))

    def export(self, title: str | None = DEFAULT_TITLE) -> bytes:
        """Serialize the published document as UTF-8 SDEF bytes."""
        return render(self.document, title)
