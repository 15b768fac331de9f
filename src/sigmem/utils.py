"""Shared utilities."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Any, Iterator

import orjson

SENTENCE_SPLIT_RE = re.compile(r"[.!?]")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def json_dumps(obj: Any, indent: bool = False) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, option=option)


def json_loads(data: str | bytes) -> Any:
    return orjson.loads(data)


def iso_str(dt: datetime) -> str:
    return dt.isoformat()


def parse_iso(s: str) -> datetime:
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def hours_between(a: datetime, b: datetime) -> float:
    """Signed hours from ``b`` to ``a``."""
    return (a - b).total_seconds() / 3600.0


def split_sentences(text: str) -> list[str]:
    return SENTENCE_SPLIT_RE.split(text)


def words(text: str) -> list[str]:
    return text.split()


def clean_word(word: str) -> str:
    """Lower-case and strip non-alphabetic characters from both ends."""
    lowered = word.lower()
    start = 0
    end = len(lowered)
    while start < end and not lowered[start].isalpha():
        start += 1
    while end > start and not lowered[end - 1].isalpha():
        end -= 1
    return lowered[start:end]


def ngrams(tokens: list[str], n: int) -> Iterator[str]:
    for i in range(len(tokens) - n + 1):
        yield " ".join(tokens[i:i + n])
