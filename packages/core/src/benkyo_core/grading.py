"""Answer grading shared by word and kana reviews."""

from __future__ import annotations

import re
from enum import Enum

# Sentence-ending punctuation ignored when comparing answers (ASCII and full-width).
_IGNORED_PUNCTUATION = re.compile(r"[.,!。，！]")


class Grade(str, Enum):
    EXACT = "exact"
    SIMILAR = "similar"
    WRONG = "wrong"


def normalize(text: str | None) -> str:
    """Trim, lowercase and drop sentence-ending punctuation."""
    return _IGNORED_PUNCTUATION.sub("", (text or "").strip().lower())


def grade_answer(user_answer: str | None, expected: str | None) -> Grade:
    """Compare a typed answer with the expected one.

    Exact when the normalized strings match; Similar when the answer and the
    expected value contain one another; Wrong otherwise. An answer that
    normalizes to nothing is always Wrong.
    """
    user = normalize(user_answer)
    correct = normalize(expected)
    if not user:
        return Grade.WRONG
    if user == correct:
        return Grade.EXACT
    if user and (user in correct or correct in user):
        return Grade.SIMILAR
    return Grade.WRONG
