"""Natural ordering for department names.

``鋳造1課 < 鋳造2課 < 鋳造10課 < 鋳造検査``: runs of digits compare as numbers,
everything else compares as NFKC-normalised, case-folded text, so
full-width digits (``１課``) sort with their ASCII equivalents.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

_DIGITS = re.compile(r"([0-9]+)")


def natural_key(name: str) -> tuple[tuple[int, int, str], ...]:
    """Sort key splitting *name* into alternating text and number parts.

    Each part is ``(kind, number, text)`` with numbers (kind 0) ordered
    before text (kind 1) at the same position, so keys of mixed shape stay
    comparable.
    """
    text = unicodedata.normalize("NFKC", name).casefold()
    parts: list[tuple[int, int, str]] = []
    for i, chunk in enumerate(_DIGITS.split(text)):
        if not chunk:
            continue
        if i % 2:
            parts.append((0, int(chunk), chunk))
        else:
            parts.append((1, 0, chunk))
    return tuple(parts)


def sort_departments(departments: Iterable[str]) -> list[str]:
    """Return *departments* in natural order; ties keep the original text order."""
    return sorted(departments, key=lambda d: (natural_key(d), d))
