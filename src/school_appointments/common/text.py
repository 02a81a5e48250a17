from __future__ import annotations

import random
import string
from typing import Sequence, TypeVar

from ..core.constants import PROPER_CASE_EXCLUDED_WORDS, QRCODE_LENGTH

T = TypeVar("T")

_ALPHANUMERIC = string.ascii_letters + string.digits
_rng = random.SystemRandom()


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split `items` into contiguous chunks of `size`; the last may be shorter."""
    if size <= 0:
        raise ValueError("chunk size must be positive")
    out: list[list[T]] = []
    for start in range(0, len(items), size):
        out.append(list(items[start:start + size]))
    return out


def to_proper(text: str) -> str:
    """Title-case each word, keeping short joining words in lowercase."""
    words = []
    for word in text.split(" "):
        if word.lower() in PROPER_CASE_EXCLUDED_WORDS:
            words.append(word.lower())
        else:
            words.append(word[:1].upper() + word[1:].lower())
    return " ".join(words)


def generate_acronym(phrase: str) -> str:
    return "".join(
        word[0].upper()
        for word in phrase.split(" ")
        if word and word.lower() not in PROPER_CASE_EXCLUDED_WORDS
    )


def generate_random_string(length: int = 10) -> str:
    return "".join(_rng.choice(_ALPHANUMERIC) for _ in range(length))


def generate_qrcode() -> str:
    return generate_random_string(QRCODE_LENGTH).upper()


def generate_student_id() -> str:
    return f"GC-{_rng.randint(100000, 999999)}"
