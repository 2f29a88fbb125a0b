"""
Vocabulary enrichments: thesaurus, phonetics and grammar forms.

Enrichments are fetched lazily. Every satisfied hint is recorded in the
entry's ``details["enrichments"]`` so a repeat query never refetches it.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .knowledge import KnowledgeEntry

logger = logging.getLogger(__name__)

DEFINITION = "definition"
THESAURUS = "thesaurus"
PHONETICS = "phonetics"
GRAMMAR = "grammar"

_HINT_KEYWORDS = (
    (THESAURUS, ("synonym", "similar", "antonym", "opposite")),
    (PHONETICS, ("pronounce", "pronunciation", "phonetic")),
    (GRAMMAR, ("grammar", "plural", "past tense", "participle", "comparative")),
)


def detect_hints(text: str) -> Tuple[str, ...]:
    """Which enrichments the user asked for; a plain definition by default"""
    lowered = (text or "").lower()
    hints = [DEFINITION] if re.search(r"\b(define|definition|meaning|mean)\b", lowered) else []
    for hint, keywords in _HINT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            hints.append(hint)
    return tuple(hints) or (DEFINITION,)


# ═══════════════════════════════════════════════════════════════════════════════
# GRAMMAR FORMS
# ═══════════════════════════════════════════════════════════════════════════════

_VOWELS = "aeiou"
_IRREGULAR_PLURALS = {
    "child": "children", "person": "people", "man": "men", "woman": "women",
    "mouse": "mice", "tooth": "teeth", "foot": "feet", "goose": "geese",
}
_IRREGULAR_PAST = {
    "be": "was", "go": "went", "have": "had", "do": "did", "see": "saw",
    "make": "made", "take": "took", "come": "came", "know": "knew",
    "think": "thought", "learn": "learned", "run": "ran", "write": "wrote",
}
_IRREGULAR_COMPARATIVE = {"good": "better", "bad": "worse", "far": "farther"}


def _ends_cvc(word: str) -> bool:
    return (
        len(word) >= 3
        and word[-1] not in _VOWELS + "wxy"
        and word[-2] in _VOWELS
        and word[-3] not in _VOWELS
    )


def _plural(word: str) -> str:
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    return word + "s"


def _past_tense(word: str) -> str:
    if word in _IRREGULAR_PAST:
        return _IRREGULAR_PAST[word]
    if word.endswith("e"):
        return word + "d"
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ied"
    if _ends_cvc(word) and len(word) <= 4:
        return word + word[-1] + "ed"
    return word + "ed"


def _present_participle(word: str) -> str:
    if word.endswith("ie"):
        return word[:-2] + "ying"
    if word.endswith("e") and not word.endswith("ee"):
        return word[:-1] + "ing"
    if _ends_cvc(word) and len(word) <= 4:
        return word + word[-1] + "ing"
    return word + "ing"


def _comparative(word: str) -> str:
    if word in _IRREGULAR_COMPARATIVE:
        return _IRREGULAR_COMPARATIVE[word]
    if len(word) > 6:
        return f"more {word}"
    if word.endswith("e"):
        return word + "r"
    if word.endswith("y") and len(word) > 1 and word[-2] not in _VOWELS:
        return word[:-1] + "ier"
    if _ends_cvc(word) and len(word) <= 4:
        return word + word[-1] + "er"
    return word + "er"


def grammar_forms(word: str, part_of_speech: str = "") -> Dict[str, str]:
    """Rule-based inflections for the word's part of speech (all of them when unknown)"""
    word = (word or "").strip().lower()
    if not word or " " in word:
        return {}
    pos = (part_of_speech or "").lower()
    forms = {}
    if pos in ("noun", "", "unknown"):
        forms["plural"] = _plural(word)
    if pos in ("verb", "", "unknown"):
        forms["past_tense"] = _past_tense(word)
        forms["present_participle"] = _present_participle(word)
    if pos in ("adjective", "", "unknown"):
        forms["comparative"] = _comparative(word)
    return forms


# ═══════════════════════════════════════════════════════════════════════════════
# ENRICHER
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class EnrichmentOutcome:
    """What enrichment added to an entry for one query"""
    details: Dict = field(default_factory=dict)
    applied: List[str] = field(default_factory=list)
    fetched: int = 0
    trace: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


class Enricher:
    """Fills in requested enrichments, asking the dictionary only when needed"""

    def __init__(self, dictionary=None):
        self.dictionary = dictionary

    def _fetch(self, word: str, outcome: EnrichmentOutcome):
        if self.dictionary is None:
            return None
        outcome.fetched += 1
        return self.dictionary.lookup(word)

    def enrich(self, entry: KnowledgeEntry, hints, fresh: bool = False) -> EnrichmentOutcome:
        """
        Add the enrichments named by ``hints`` to a copy of ``entry.details``.

        ``fresh`` means the entry was fetched online during this query, so
        its dictionary data is already complete.
        """
        outcome = EnrichmentOutcome()
        details = entry.details
        done = set(details.get("enrichments") or ())
        wanted = [hint for hint in hints if hint != DEFINITION]
        if not wanted:
            return outcome

        lookups = {}

        def dictionary_entry():
            if "entry" not in lookups:
                lookups["entry"] = self._fetch(entry.key, outcome)
            return lookups["entry"]

        for hint in wanted:
            if hint in done:
                outcome.trace.append(f"Using cached {hint} data for \"{entry.key}\"")
                continue

            if hint == GRAMMAR:
                forms = grammar_forms(entry.key, details.get("part_of_speech", ""))
                outcome.details["grammar"] = forms
                outcome.trace.append(f"Derived grammar forms for \"{entry.key}\"")

            elif hint == THESAURUS:
                if not fresh and not (details.get("synonyms") or details.get("antonyms")):
                    fetched_entry = dictionary_entry()
                    if fetched_entry is not None:
                        outcome.details["synonyms"] = list(fetched_entry.synonyms)
                        outcome.details["antonyms"] = list(fetched_entry.antonyms)
                    else:
                        outcome.trace.append(f"No thesaurus data available for \"{entry.key}\"")
                        continue
                outcome.trace.append(f"Thesaurus data ready for \"{entry.key}\"")

            elif hint == PHONETICS:
                if not fresh and not details.get("phonetic"):
                    fetched_entry = dictionary_entry()
                    if fetched_entry is not None:
                        outcome.details["phonetic"] = fetched_entry.phonetic
                        outcome.details["audio"] = fetched_entry.audio
                    else:
                        outcome.trace.append(f"No phonetic data available for \"{entry.key}\"")
                        continue
                outcome.trace.append(f"Phonetic data ready for \"{entry.key}\"")

            else:
                logger.debug(f"Unknown enrichment hint ignored: {hint}")
                continue

            outcome.applied.append(hint)

        if outcome.applied:
            outcome.details["enrichments"] = sorted(done | set(outcome.applied))
        return outcome
