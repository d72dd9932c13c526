"""
Fallback page name counter.

Pages whose URL has no usable file name are saved as "<n>.html". The
next n is kept in a small state file in the storage root so numbering
continues across runs.
"""

from pathlib import Path
from typing import Union

from .constants import COUNTER_FILE_NAME
from .errors import ErrorKind, MirrorError
from .log import get_logger, report_failure


class NameCounter:
    """
    File-backed counter for fallback page names.

    Reading and advancing the counter is not atomic: two processes
    sharing a storage root may hand out the same number.
    """

    FIRST_ID = 1

    def __init__(self, storage_root: Union[str, Path]):
        """
        Initialize the counter.

        Args:
            storage_root: Root folder holding the state file
        """
        self.storage_root = Path(storage_root)
        self.path = self.storage_root / COUNTER_FILE_NAME
        self.logger = get_logger("counter")

    def read_counter(self) -> int:
        """
        Read the next fallback number.

        A missing or unreadable state file never blocks progress; the
        first number is returned instead.

        Returns:
            Stored value, or 1 if absent or corrupt
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                line = f.readline().strip()
        except FileNotFoundError:
            self.logger.debug(f"first nameless page will be named {self.FIRST_ID}.html")
            return self.FIRST_ID
        except OSError as e:
            report_failure(self.logger, MirrorError(
                ErrorKind.COUNTER_CORRUPTION, str(self.path), f"cannot read counter: {e}"
            ))
            return self.FIRST_ID

        try:
            value = int(line)
        except ValueError:
            value = -1

        if value < 0:
            report_failure(self.logger, MirrorError(
                ErrorKind.COUNTER_CORRUPTION, str(self.path), f"cannot parse counter value {line!r}"
            ))
            return self.FIRST_ID

        return value

    def write_counter(self, value: int) -> bool:
        """
        Overwrite the state file with a value.

        Args:
            value: Next fallback number

        Returns:
            True if written, False if the write failed
        """
        try:
            self.storage_root.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                f.write(f"{value}\n")
            return True
        except OSError as e:
            self.logger.error(f"Could not save counter to {self.path}: {e}")
            return False

    def next_id(self) -> int:
        """Take the next fallback number and advance the counter."""
        value = self.read_counter()
        self.write_counter(value + 1)
        return value


class MemoryNameCounter:
    """In-memory counter with the same interface as NameCounter."""

    def __init__(self, start: int = NameCounter.FIRST_ID):
        self.value = start

    def read_counter(self) -> int:
        return self.value

    def write_counter(self, value: int) -> bool:
        self.value = value
        return True

    def next_id(self) -> int:
        value = self.read_counter()
        self.write_counter(value + 1)
        return value
