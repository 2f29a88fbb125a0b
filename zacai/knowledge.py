"""Knowledge store: owns every knowledge entry, grouped by collection"""

import copy
import logging
import re
import time
from typing import Any, Dict, Iterable, List, Optional

from . import config
from .errors import ImportFormatError

logger = logging.getLogger(__name__)

_SOURCE_RANK = {config.SOURCE_ONLINE: 0, config.SOURCE_LEARNED: 1, config.SOURCE_SEED: 2}


def normalize_key(text: str) -> str:
    """Lower-case and collapse whitespace so keys compare reliably"""
    return re.sub(r"\s+", " ", str(text or "")).strip().lower()


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


# Expected types of the optional record fields; None is always allowed
_FIELD_TYPES = {
    "category": str,
    "source": str,
    "confidence": (int, float),
    "timestamp": (int, float),
    "usage": dict,
    "details": dict,
}


class KnowledgeEntry:
    """Single knowledge entry"""

    COLLECTION = ""

    def __init__(
        self,
        key: str,
        value: Any,
        category: str = "general",
        source: str = config.SOURCE_LEARNED,
        confidence: float = 0.8,
        timestamp: int = None,
        usage: Dict = None,
        details: Dict = None,
    ):
        if source not in config.SOURCES:
            raise ValueError(f"Unknown entry source: {source!r}")
        self.key = normalize_key(key)
        self.value = value
        self.category = category
        self.source = source
        self.confidence = _clamp(confidence)
        self.timestamp = int(timestamp if timestamp is not None else time.time())
        self.usage = usage
        self.details = details or {}

    @property
    def collection(self) -> str:
        return self.COLLECTION

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return {
            "key": self.key,
            "value": copy.deepcopy(self.value),
            "category": self.category,
            "source": self.source,
            "confidence": self.confidence,
            "timestamp": self.timestamp,
            "usage": dict(self.usage) if self.usage is not None else None,
            "details": copy.deepcopy(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "KnowledgeEntry":
        """Create from dictionary; raises ValueError for a wrongly typed record"""
        if not isinstance(data, dict):
            raise ValueError(f"entry must be an object, not {type(data).__name__}")
        if not isinstance(data.get("key"), str):
            raise ValueError("entry key must be a string")
        for name, expected in _FIELD_TYPES.items():
            value = data.get(name)
            if value is not None and not isinstance(value, expected):
                raise ValueError(f"entry field '{name}' has the wrong type ({type(value).__name__})")
        return cls(
            key=data["key"],
            value=data.get("value"),
            category=data.get("category", "general"),
            source=data.get("source", config.SOURCE_LEARNED),
            confidence=data.get("confidence", 0.8),
            timestamp=data.get("timestamp"),
            usage=data.get("usage"),
            details=data.get("details") or {},
        )

    def copy(self) -> "KnowledgeEntry":
        return type(self).from_dict(self.to_dict())

    def __eq__(self, other):
        if not isinstance(other, KnowledgeEntry):
            return NotImplemented
        return self.collection == other.collection and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}(key={self.key!r}, source={self.source!r}, confidence={self.confidence:.2f})"


class VocabularyEntry(KnowledgeEntry):
    """A word and its definition, with mastery tracking"""

    COLLECTION = config.VOCABULARY

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        usage = self.usage or {}
        self.usage = {
            "attempts": int(usage.get("attempts", 0)),
            "successes": int(usage.get("successes", 0)),
        }

    @property
    def definition(self) -> str:
        return self.value

    @property
    def mastery(self) -> float:
        if not self.usage["attempts"]:
            return 0.0
        return self.usage["successes"] / self.usage["attempts"]


class MathEntry(KnowledgeEntry):
    """A mathematical concept or a solved calculation"""

    COLLECTION = config.MATHEMATICS

    @property
    def result(self) -> Any:
        return self.value


class FactEntry(KnowledgeEntry):
    """A general-knowledge fact"""

    COLLECTION = config.FACTS

    @property
    def content(self) -> str:
        return self.value


class PersonalEntry(KnowledgeEntry):
    """Something the user told us about themselves"""

    COLLECTION = config.PERSONAL


ENTRY_TYPES = {
    config.VOCABULARY: VocabularyEntry,
    config.MATHEMATICS: MathEntry,
    config.FACTS: FactEntry,
    config.PERSONAL: PersonalEntry,
}


def make_entry(collection: str, **fields) -> KnowledgeEntry:
    """Build the entry subclass that belongs to ``collection``"""
    try:
        entry_type = ENTRY_TYPES[collection]
    except KeyError:
        raise ValueError(f"Unknown knowledge collection: {collection!r}") from None
    return entry_type(**fields)


def _merge_details(existing: Dict, incoming: Dict) -> Dict:
    """Union list details, add missing scalars, never drop what is already known"""
    merged = copy.deepcopy(existing)
    for name, value in incoming.items():
        current = merged.get(name)
        if isinstance(current, list) and isinstance(value, list):
            for item in value:
                if item not in current:
                    current.append(copy.deepcopy(item))
        elif isinstance(current, dict) and isinstance(value, dict):
            merged[name] = _merge_details(current, value)
        elif current in (None, "", [], {}):
            merged[name] = copy.deepcopy(value)
    return merged


def merge_entries(existing: KnowledgeEntry, incoming: KnowledgeEntry) -> KnowledgeEntry:
    """
    Merge ``incoming`` into ``existing`` and return the merged copy.

    Seed entries keep their source and value; their confidence may only rise.
    Other entries take the incoming value when it is at least as trusted.
    Merging an entry with itself yields the same entry.
    """
    merged = existing.copy()
    existing_rank = _SOURCE_RANK[existing.source]
    incoming_rank = _SOURCE_RANK[incoming.source]

    if existing.source == config.SOURCE_SEED:
        merged.confidence = max(existing.confidence, incoming.confidence)
    elif incoming_rank > existing_rank or incoming.confidence >= existing.confidence:
        merged.value = copy.deepcopy(incoming.value)
        merged.category = incoming.category
        merged.confidence = incoming.confidence
        merged.source = incoming.source if incoming_rank >= existing_rank else existing.source

    merged.details = _merge_details(existing.details, incoming.details)
    merged.timestamp = max(existing.timestamp, incoming.timestamp)
    if existing.usage is not None and incoming.usage is not None:
        merged.usage = {
            name: max(int(existing.usage.get(name, 0)), int(incoming.usage.get(name, 0)))
            for name in ("attempts", "successes")
        }
    return merged


class KnowledgeStore:
    """
    Owner of every knowledge entry.

    Callers only ever receive copies; all changes go through put/merge.
    Storage is optional and is only written through ``persist``.
    """

    def __init__(self, storage=None):
        self.storage = storage
        self._entries: Dict[str, Dict[str, KnowledgeEntry]] = {name: {} for name in config.COLLECTIONS}

    # ── Accessors ─────────────────────────────────────────────────────────────

    def _collection(self, collection: str) -> Dict[str, KnowledgeEntry]:
        try:
            return self._entries[collection]
        except KeyError:
            raise ValueError(f"Unknown knowledge collection: {collection!r}") from None

    def get(self, collection: str, key: str) -> Optional[KnowledgeEntry]:
        entry = self._collection(collection).get(normalize_key(key))
        return entry.copy() if entry else None

    def contains(self, collection: str, key: str) -> bool:
        return normalize_key(key) in self._collection(collection)

    def entries(self, collection: str, source: str = None) -> List[KnowledgeEntry]:
        """All entries of a collection (copies), optionally filtered by source"""
        return [
            entry.copy()
            for entry in self._collection(collection).values()
            if source is None or entry.source == source
        ]

    def count(self, collection: str = None) -> int:
        if collection is not None:
            return len(self._collection(collection))
        return sum(len(items) for items in self._entries.values())

    # ── Mutation ──────────────────────────────────────────────────────────────

    def put(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        """Insert an entry; an existing key is merged, never replaced"""
        return self.merge(entry)

    def merge(self, entry: KnowledgeEntry) -> KnowledgeEntry:
        items = self._collection(entry.collection)
        existing = items.get(entry.key)
        stored = merge_entries(existing, entry) if existing else entry.copy()
        items[entry.key] = stored
        return stored.copy()

    def record_usage(self, key: str, success: bool = False) -> Optional[KnowledgeEntry]:
        """
        Count a vocabulary attempt, or a success for an earlier attempt.

        Successes never exceed attempts.
        """
        entry = self._collection(config.VOCABULARY).get(normalize_key(key))
        if entry is None:
            return None
        if success:
            entry.usage["successes"] = min(entry.usage["successes"] + 1, max(entry.usage["attempts"], 1))
            entry.usage["attempts"] = max(entry.usage["attempts"], entry.usage["successes"])
        else:
            entry.usage["attempts"] += 1
        entry.timestamp = int(time.time())
        return entry.copy()

    def remove_collection(self, collection: str, source: str = None):
        items = self._collection(collection)
        for key in [k for k, e in items.items() if source is None or e.source == source]:
            del items[key]

    # ── Search ────────────────────────────────────────────────────────────────

    def search(self, collection: str, words: Iterable[str], source_tier: str = None,
               min_relevance: float = 0.0) -> List[Dict]:
        """
        Rank entries by the share of query words found in their text.

        ``source_tier`` is "seed" for curated entries or "learned" for
        everything acquired at runtime (learned and online).
        Ties go to the shorter, more specific key.
        """
        words = [w for w in words if w]
        if not words:
            return []

        results = []
        for entry in self._collection(collection).values():
            if source_tier == config.SOURCE_SEED and entry.source != config.SOURCE_SEED:
                continue
            if source_tier == config.SOURCE_LEARNED and entry.source == config.SOURCE_SEED:
                continue
            text = f"{entry.key} {entry.value}".lower()
            matches = sum(1 for word in words if word in text)
            relevance = matches / len(words)
            if matches and relevance >= min_relevance:
                results.append({"entry": entry.copy(), "relevance": relevance})

        results.sort(key=lambda r: (-r["relevance"], len(r["entry"].key), r["entry"].key))
        return results

    # ── Seeding, persistence, import/export ───────────────────────────────────

    def load_seed(self, seed: Dict[str, Iterable[Dict]]):
        """Merge curated entries; seed data is always present"""
        for collection, records in seed.items():
            for record in records:
                self.merge(make_entry(collection, source=config.SOURCE_SEED, **record))

    def load(self):
        """Merge every persisted collection; a broken collection does not block the others"""
        if self.storage is None:
            return
        for collection in config.COLLECTIONS:
            loaded = 0
            for data in self.storage.load(collection):
                try:
                    self.merge(ENTRY_TYPES[collection].from_dict(data))
                    loaded += 1
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed {collection} entry: {e}")
            logger.info(f"Loaded {loaded} {collection} entries")

    def persist(self, collection: str) -> bool:
        """Write one collection to storage; failures are logged, never raised"""
        if self.storage is None:
            return True
        try:
            data = [entry.to_dict() for entry in self._collection(collection).values()]
            ok = self.storage.save(collection, data)
        except Exception as e:
            logger.error(f"Failed to persist {collection}: {e}")
            return False
        if not ok:
            logger.error(f"Failed to persist {collection}")
        return bool(ok)

    def export(self) -> Dict:
        """Serialise the whole store to a portable document"""
        return {
            "format": config.EXPORT_FORMAT,
            "version": config.EXPORT_VERSION,
            "exported_at": int(time.time()),
            "collections": {
                name: [entry.to_dict() for entry in sorted(items.values(), key=lambda e: e.key)]
                for name, items in self._entries.items()
            },
        }

    def import_document(self, document: Dict) -> List[str]:
        """
        Merge an exported document into the store.

        Returns the collections that were touched.
        """
        if not isinstance(document, dict) or document.get("format") != config.EXPORT_FORMAT:
            raise ImportFormatError("Document is not a ZacAI knowledge export")
        collections = document.get("collections")
        if not isinstance(collections, dict):
            raise ImportFormatError("Knowledge export has no collections")

        touched = []
        for name, records in collections.items():
            if name not in ENTRY_TYPES:
                logger.warning(f"Ignoring unknown collection in import: {name}")
                continue
            if records is None:
                records = []
            if not isinstance(records, list):
                raise ImportFormatError(f"Collection {name} is not a list of entries")
            for data in records:
                try:
                    self.merge(ENTRY_TYPES[name].from_dict(data))
                except (KeyError, TypeError, ValueError) as e:
                    raise ImportFormatError(f"Malformed {name} entry: {e}") from e
            touched.append(name)
        return touched

    def get_statistics(self) -> Dict:
        """Get knowledge store statistics"""
        stats = {"total_entries": self.count()}
        for name, items in self._entries.items():
            by_source = {source: 0 for source in config.SOURCES}
            for entry in items.values():
                by_source[entry.source] += 1
            stats[name] = {"total": len(items), **by_source}
        stats["learned_entries"] = sum(
            stats[name][config.SOURCE_LEARNED] + stats[name][config.SOURCE_ONLINE]
            for name in config.COLLECTIONS
        )
        return stats
