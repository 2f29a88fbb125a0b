"""
Pathway router: maps classifier features to an ordered list of pathways.
"""

from dataclasses import dataclass
from typing import List, Tuple

from . import config
from .classifier import MATHEMATICS, Features

MATHEMATICAL = "mathematical"
FACTUAL = "factual"
PERSONAL = "personal"
CONVERSATIONAL = "conversational"


@dataclass(frozen=True)
class PathwayRef:
    """Static description of a pathway."""
    name: str
    kind: str
    triggers: Tuple[str, ...]
    weight: float
    phrases: Tuple[str, ...] = ()


PATHWAYS = {
    MATHEMATICAL: PathwayRef(
        name="Mathematical Reasoning",
        kind=MATHEMATICAL,
        triggers=("calculate", "compute", "solve", "sqrt", "root", "factorial",
                  "percent", "power", "squared"),
        weight=config.MATHEMATICAL_WEIGHT,
    ),
    FACTUAL: PathwayRef(
        name="Factual Knowledge",
        kind=FACTUAL,
        triggers=("define", "definition", "meaning", "mean", "synonym", "synonyms",
                  "antonym", "antonyms", "opposite", "similar", "pronounce", "pronunciation",
                  "spell", "plural", "tense", "grammar", "participle", "comparative", "fact"),
        phrases=("tell me about",),
        weight=config.FACTUAL_WEIGHT,
    ),
    PERSONAL: PathwayRef(
        name="Personal Memory",
        kind=PERSONAL,
        triggers=("remember", "myself", "personal"),
        weight=config.PERSONAL_WEIGHT,
    ),
    CONVERSATIONAL: PathwayRef(
        name="Conversational",
        kind=CONVERSATIONAL,
        triggers=("hello", "hi", "hey", "thanks"),
        weight=config.CONVERSATIONAL_WEIGHT,
    ),
}


def _triggered_by_keyword(kind: str, features: Features) -> bool:
    ref = PATHWAYS[kind]
    if any(token in ref.triggers for token in features.tokens):
        return True
    joined = f" {' '.join(features.tokens)} "
    return any(f" {phrase} " in joined for phrase in ref.phrases)


def select_pathways(features: Features) -> List[PathwayRef]:
    """
    Return the pathways to try, highest priority first.

    Conversational is always last. Mathematical, factual and personal are
    prepended in that order when triggered, so a later trigger runs earlier.
    """
    selected = [PATHWAYS[CONVERSATIONAL]]

    if features.type == MATHEMATICS or (
        features.has_numbers
        and (features.has_math_symbols or _triggered_by_keyword(MATHEMATICAL, features))
    ):
        selected.insert(0, PATHWAYS[MATHEMATICAL])

    if features.has_question_word or _triggered_by_keyword(FACTUAL, features):
        selected.insert(0, PATHWAYS[FACTUAL])

    if features.has_first_person or _triggered_by_keyword(PERSONAL, features):
        selected.insert(0, PATHWAYS[PERSONAL])

    return selected
