"""
Key generation for auto-increment collections.
"""
from dataclasses import dataclass
from typing import Any, Iterable


def is_integer_key(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


@dataclass
class KeyGenerator:
    """
    High-water mark of the integer keys a collection has handed out or seen.

    The mark only moves up. Deleting the record with the largest key, or
    truncating the collection, does not make used keys available again.
    """

    current: int = 0

    @classmethod
    def seeded(cls, keys: Iterable[Any], saved: int = 0) -> "KeyGenerator":
        """
        Start from the larger of a saved mark and the largest integer key.

        Args:
            keys: Key values of the loaded records
            saved: Mark persisted by an earlier session
        """
        return cls(max([saved, *(k for k in keys if is_integer_key(k))]))

    def next(self) -> int:
        self.current += 1
        return self.current

    def observe(self, key: Any) -> bool:
        """Raise the mark to an explicit integer key. Returns True if it moved."""
        if is_integer_key(key) and key > self.current:
            self.current = key
            return True
        return False
