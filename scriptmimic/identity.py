"""
Content-derived identifiers for style profiles.

The id is a 32-bit rolling hash (h = h*31 + code unit) over
``name + "|".join(transcripts)``, wrapped to a signed 32-bit int, made
positive and written in base 36 behind a ``dna-`` prefix.

Same inputs always give the same id, so re-analysing a corpus upserts the
stored profile instead of duplicating it. It is NOT collision-free.
"""

from __future__ import annotations

from typing import Iterable

ID_PREFIX = "dna-"
SEPARATOR = "|"

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _utf16_units(text: str) -> Iterable[int]:
    # hash over UTF-16 code units so astral chars count as surrogate pairs
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def rolling_hash(text: str) -> int:
    """Signed 32-bit ``h*31 + c`` hash of *text*."""
    h = 0
    for unit in _utf16_units(text):
        h = (h * 31 + unit) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def stable_profile_id(name: str, transcripts: Iterable[str]) -> str:
    source = name + SEPARATOR.join(transcripts)
    return ID_PREFIX + to_base36(abs(rolling_hash(source)))
