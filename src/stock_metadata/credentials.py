"""API key pool parsing.

Users paste keys one per line or comma separated. Parsing is a pure function
of the raw text, so the same blob always yields the same ordered pool.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from stock_metadata.constants import KEY_HINT_LENGTH, KEY_HINT_MIN_KEY_LENGTH

_SEPARATORS = re.compile(r"[\n,]")


def parse_credentials(raw: str | None) -> tuple[str, ...]:
    """Split a raw key blob into ordered, distinct, non-empty tokens.

    Args:
        raw: Newline or comma separated keys. ``None`` is treated as empty.

    Returns:
        Keys in first-seen order with surrounding whitespace removed.

    Example:
        >>> parse_credentials("a, b,\\n a ,,c")
        ('a', 'b', 'c')
    """
    if not raw:
        return ()
    seen: dict[str, None] = {}
    for token in _SEPARATORS.split(raw):
        key = token.strip()
        if key and key not in seen:
            seen[key] = None
    return tuple(seen)


def mask_key(key: str) -> str:
    """Return a log-safe hint for a key.

    Only the last few characters are shown, and only for keys at least twice
    as long as the hint; shorter keys are masked entirely.

    Example:
        >>> mask_key("AIzaSyExample1234"), mask_key("abc")
        ('...1234', '...****')
    """
    if len(key) < KEY_HINT_MIN_KEY_LENGTH:
        return "..." + "*" * KEY_HINT_LENGTH
    return f"...{key[-KEY_HINT_LENGTH:]}"


@dataclass(frozen=True, slots=True)
class CredentialPool:
    """Read-only ordered set of API keys shared by every attempt in a run."""

    keys: tuple[str, ...] = ()

    @classmethod
    def from_text(cls, raw: str | None) -> CredentialPool:
        """Build a pool from user-supplied text."""
        return cls(parse_credentials(raw))

    def __len__(self) -> int:
        return len(self.keys)

    def __bool__(self) -> bool:
        return bool(self.keys)

    def __iter__(self):
        return iter(self.keys)

    def __repr__(self) -> str:
        hints = ", ".join(mask_key(k) for k in self.keys)
        return f"CredentialPool([{hints}])"
