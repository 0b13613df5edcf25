"""Service for deriving stable identities for revision items."""

import hashlib
import re

from alfanumrik.domain.learning.models import BankQuestion

_WHITESPACE = re.compile(r"\s+")


def normalize_question_text(text: str) -> str:
    """Collapse runs of whitespace and trim, so reflowed text keeps its identity."""
    return _WHITESPACE.sub(" ", text).strip()


def item_key_for(question: BankQuestion | str) -> str:
    """
    Content hash identifying a question in the revision set.

    Two questions share a key exactly when their normalized texts are equal.
    """
    text = question if isinstance(question, str) else question.question_text
    digest = hashlib.sha256(normalize_question_text(text).encode("utf-8")).hexdigest()
    return f"q_{digest[:24]}"
