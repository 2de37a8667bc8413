"""Single-slot signals consumed by the presentation layer."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class ErrorChannel(QObject):
    """Holds the most recent failure message; the last one wins.

    Example:
        errors = ErrorChannel()
        errors.changed.connect(status_bar.show_error)
        errors.publish(ConnectionError("host unreachable"))
    """

    changed = Signal(object)  # str message, or None when cleared

    def __init__(self) -> None:
        super().__init__()
        self._error: BaseException | None = None

    @property
    def message(self) -> str | None:
        """Return the current error message, or None."""
        return str(self._error) if self._error is not None else None

    @property
    def error(self) -> BaseException | None:
        """Return the current error, or None."""
        return self._error

    def publish(self, error: BaseException) -> None:
        """Record a failure, overwriting any previous one."""
        self._error = error
        logger.warning("Mount service call failed: %s", error)
        self.changed.emit(self.message)

    def clear(self) -> None:
        """Forget the current failure."""
        if self._error is None:
            return
        self._error = None
        self.changed.emit(None)


class LoadingFlag(QObject):
    """True while at least one refresh is in progress."""

    changed = Signal(bool)

    def __init__(self) -> None:
        super().__init__()
        self._depth = 0

    @property
    def is_loading(self) -> bool:
        """Return True while loading."""
        return self._depth > 0

    @contextmanager
    def active(self) -> Iterator[None]:
        """Hold the flag for the duration of the block, whatever its outcome."""
        self._depth += 1
        if self._depth == 1:
            self.changed.emit(True)
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                self.changed.emit(False)
