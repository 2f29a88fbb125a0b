"""Input classifier: a cheap feature summary of the raw user text"""

import re
from dataclasses import dataclass
from typing import Tuple

MATHEMATICS = "mathematics"
INQUIRY = "inquiry"
PERSONAL = "personal"
CONVERSATION = "conversation"

_DIGIT_RE = re.compile(r'\d')
_OPERATOR_RE = re.compile(r'[+\-×*÷/=]')
_ARITHMETIC_OPERATOR_RE = re.compile(r'[+\-×*÷/]')
_MATH_SYMBOL_RE = re.compile(r"\d\s*[%^!]|√\s*\d")
_QUESTION_RE = re.compile(r'\b(what|how|why|when|where|who|which)\b', re.I)
_FIRST_PERSON_RE = re.compile(r'\b(my|i|me|am|have)\b', re.I)
_TOKEN_RE = re.compile(r"[a-z0-9']+")

_TYPE_COMPLEXITY = {
    INQUIRY: 0.6,
    PERSONAL: 0.4,
    CONVERSATION: 0.3,
}


@dataclass(frozen=True)
class Features:
    """Feature summary of one input"""
    type: str
    complexity: float
    has_numbers: bool
    has_operators: bool
    has_question_word: bool
    has_first_person: bool
    word_count: int
    has_math_symbols: bool = False
    tokens: Tuple[str, ...] = ()


def _math_complexity(text: str) -> float:
    operators = len(_ARITHMETIC_OPERATOR_RE.findall(text))
    return min(0.9, 0.3 + operators * 0.2)


def classify(text) -> Features:
    """
    Classify raw input. Never fails: anything unusable is a conversation.

    Type precedence: mathematics > inquiry > personal > conversation.
    """
    if not isinstance(text, str):
        text = ""
    stripped = text.strip()

    has_numbers = bool(_DIGIT_RE.search(stripped))
    has_operators = bool(_OPERATOR_RE.search(stripped))
    has_question_word = bool(_QUESTION_RE.search(stripped))
    has_first_person = bool(_FIRST_PERSON_RE.search(stripped))
    tokens = tuple(_TOKEN_RE.findall(stripped.lower()))

    if has_numbers and has_operators:
        kind = MATHEMATICS
        complexity = _math_complexity(stripped)
    elif has_question_word:
        kind = INQUIRY
        complexity = _TYPE_COMPLEXITY[INQUIRY]
    elif has_first_person:
        kind = PERSONAL
        complexity = _TYPE_COMPLEXITY[PERSONAL]
    else:
        kind = CONVERSATION
        complexity = _TYPE_COMPLEXITY[CONVERSATION]

    return Features(
        type=kind,
        complexity=complexity,
        has_numbers=has_numbers,
        has_operators=has_operators,
        has_question_word=has_question_word,
        has_first_person=has_first_person,
        word_count=len(stripped.split()),
        tokens=tokens,
        has_math_symbols=bool(_MATH_SYMBOL_RE.search(stripped)),
    )
