"""Pool of drive letters that are free to mount at."""

from collections.abc import Iterable

from sshdrive.core.errors import InvariantViolation


class DriveLetterPool:
    """Sorted set of available drive letters.

    Kept disjoint from the letters of connected mounts: mounting reserves
    a letter, unmounting releases it.
    """

    def __init__(self, letters: Iterable[str] = ()) -> None:
        self._letters: list[str] = sorted(set(letters))

    def __len__(self) -> int:
        return len(self._letters)

    def __contains__(self, letter: object) -> bool:
        return letter in self._letters

    @property
    def letters(self) -> list[str]:
        """Return the available letters in ascending order."""
        return list(self._letters)

    def load(self, letters: Iterable[str]) -> None:
        """Replace the pool with the given letters, sorted and de-duplicated."""
        self._letters = sorted(set(letters))

    def reserve(self, letter: str) -> bool:
        """Take a letter out of the pool.

        Idempotent: a letter that is already gone is not an error, since a
        concurrent caller may have reserved it first.

        Returns:
            True if the letter was in the pool.
        """
        if letter not in self._letters:
            return False
        self._letters.remove(letter)
        return True

    def check_release(self, letter: str) -> None:
        """Raise InvariantViolation if release(letter) would be rejected."""
        if letter in self._letters:
            raise InvariantViolation(
                f"Drive {letter}: released while already available (mount/unmount mismatch)"
            )

    def release(self, letter: str) -> None:
        """Return a letter to the pool.

        Raises:
            InvariantViolation: If the letter is already available.
        """
        self.check_release(letter)
        self._letters.append(letter)
        self._letters.sort()
