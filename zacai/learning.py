"""
Learning system for ZacAI.

Pathways never write the knowledge store themselves: they propose
``LearnEvent``s, and the ``LearningManager`` merges those into the store
and persists the touched collection.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from . import config
from .knowledge import KnowledgeEntry, KnowledgeStore, make_entry, normalize_key

logger = logging.getLogger(__name__)

# Event kinds
DEFINITION = "definition"
FACT = "fact"
CALCULATION = "calculation"
PERSONAL = "personal"
ENRICHMENT = "enrichment"
USAGE = "usage"

_EVENT_COLLECTIONS = {
    DEFINITION: config.VOCABULARY,
    FACT: config.FACTS,
    CALCULATION: config.MATHEMATICS,
    PERSONAL: config.PERSONAL,
    ENRICHMENT: config.VOCABULARY,
    USAGE: config.VOCABULARY,
}


@dataclass
class LearnEvent:
    """Something worth remembering, proposed by a pathway or the fact extractor"""
    kind: str
    key: str
    value: Any = None
    confidence: float = 0.8
    source: str = config.SOURCE_LEARNED
    category: str = "learned"
    details: Dict = field(default_factory=dict)
    collection: Optional[str] = None

    def __post_init__(self):
        if self.kind not in _EVENT_COLLECTIONS:
            raise ValueError(f"Unknown learn event kind: {self.kind!r}")
        self.key = normalize_key(self.key)
        if self.collection is None:
            self.collection = _EVENT_COLLECTIONS[self.kind]


class LearningManager:
    """Turns learn events into store merges and keeps storage in step"""

    def __init__(self, store: KnowledgeStore):
        self.store = store
        self.events_applied = 0
        self.persist_failures = 0

    def _to_entry(self, event: LearnEvent) -> Optional[KnowledgeEntry]:
        if event.kind == ENRICHMENT:
            # Details only: the stored value is never touched by an enrichment
            existing = self.store.get(event.collection, event.key)
            if existing is None:
                logger.debug(f"Enrichment for unknown entry ignored: {event.key}")
                return None
            existing.details = dict(event.details)
            return existing
        return make_entry(
            event.collection,
            key=event.key,
            value=event.value,
            category=event.category,
            source=event.source,
            confidence=event.confidence,
            details=dict(event.details),
        )

    def learn(self, event: LearnEvent) -> None:
        """Apply one event; storage failures are logged and the change is kept in memory"""
        if not event.key:
            return
        if event.kind == USAGE:
            if self.store.record_usage(event.key, success=bool(event.value)) is None:
                return
        else:
            entry = self._to_entry(event)
            if entry is None:
                return
            self.store.merge(entry)
            logger.info(f"Learned {event.kind}: {event.key}")

        self.events_applied += 1
        if not self.store.persist(event.collection):
            self.persist_failures += 1
            logger.warning(f"Keeping unsaved {event.collection} changes in memory")

    def learn_all(self, events: Iterable[LearnEvent]) -> int:
        """Apply events in order; returns how many were given"""
        count = 0
        for event in events:
            self.learn(event)
            count += 1
        return count


# ═══════════════════════════════════════════════════════════════════════════════
# PERSONAL FACT EXTRACTION
# ═══════════════════════════════════════════════════════════════════════════════

_NAME_RE = re.compile(r"\bmy name is\s+([a-z][a-z'-]*)", re.I)
_CALL_ME_RE = re.compile(r"\bcall me\s+([a-z][a-z'-]*)", re.I)
_SELF_INTRO_RE = re.compile(r"\b(?:i am|i'm|im)\s+([A-Za-z][a-z'-]*)\b(?!\s+\d)", re.I)
_AGE_RE = re.compile(r"\b(?:i am|i'm|im)\s+(\d{1,3})\s*(?:years?|yrs?)\b|\bmy age is\s+(\d{1,3})\b", re.I)
_LOCATION_RE = re.compile(r"\b(?:i live in|i'm from|i am from|im from)\s+([^.!?,]+)", re.I)
_INTEREST_RE = re.compile(r"\b(?:i like|i love|i enjoy|i'm interested in|i am interested in)\s+([^.!?]+)", re.I)
_MY_X_IS_Y_RE = re.compile(r"\bmy\s+([a-z][a-z ]{0,30}?)\s+(?:is|are)\s+([^.!?,]+)", re.I)

# Capitalised words after "I am" that are not names
_NOT_NAMES = {
    "not", "so", "very", "just", "really", "here", "back", "sorry", "going",
    "fine", "good", "ok", "okay", "a", "an", "the", "from", "interested", "trying",
    "learning", "looking", "feeling", "happy", "sad", "tired", "sure", "ready",
}
# Words after "call me" that start a time, place or condition, not a name
_NOT_CALLED = _NOT_NAMES | {
    "at", "on", "in", "later", "tomorrow", "tonight", "today", "now", "soon", "back",
    "when", "if", "after", "before", "sometime", "anytime", "maybe", "please", "again",
}
_NOT_INTERESTS = {"it", "that", "this", "you", "them", "him", "her"}


def _clean_phrase(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip().rstrip(".!?,;:")


def _personal(key: str, value: Any, confidence: float) -> LearnEvent:
    return LearnEvent(PERSONAL, key, value, confidence=confidence, category="personal")


def extract_personal_facts(text: str) -> List[LearnEvent]:
    """
    Find statements the user makes about themselves.

    "I am"/"I'm" only counts as a name when the word is capitalised, so
    "I'm happy" is not mistaken for an introduction.
    """
    if not isinstance(text, str) or not text.strip():
        return []
    events: List[LearnEvent] = []
    keys = set()

    def add(event: LearnEvent):
        if event.key and event.key not in keys:
            keys.add(event.key)
            events.append(event)

    age = _AGE_RE.search(text)
    if age:
        add(_personal("age", int(age.group(1) or age.group(2)), 0.9))

    word = None
    name = _NAME_RE.search(text)
    if name:
        word = name.group(1)
    else:
        called = _CALL_ME_RE.search(text)
        if called and called.group(1).lower() not in _NOT_CALLED:
            word = called.group(1)
    if word is None:
        for match in _SELF_INTRO_RE.finditer(text):
            candidate = match.group(1)
            if candidate[0].isupper() and candidate.lower() not in _NOT_NAMES:
                word = candidate
                break
    if word:
        add(_personal("name", word[0].upper() + word[1:], 0.95))

    location = _LOCATION_RE.search(text)
    if location:
        place = _clean_phrase(location.group(1))
        if place:
            add(_personal("location", place, 0.8))

    interests = _INTEREST_RE.search(text)
    if interests:
        for item in re.split(r",|\s+and\s+", interests.group(1)):
            item = _clean_phrase(re.sub(r"^to\s+", "", item.strip(), flags=re.I))
            if item and item.lower() not in _NOT_INTERESTS:
                add(_personal(f"interest_{item.lower()}", item, 0.7))

    for match in _MY_X_IS_Y_RE.finditer(text):
        attribute = normalize_key(match.group(1))
        value = _clean_phrase(match.group(2))
        if attribute in ("name", "age") or not value or value.lower() in ("what", "who"):
            continue
        add(_personal(attribute, value, 0.85))

    return events
