"""
Pathway executors.

Each pathway turns the user's text into a ``PathwayResult``. Pathways only
read the knowledge store; anything worth remembering is returned as a
learn proposal.
"""

import logging
import re
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from . import arithmetic, config
from .enrichment import DEFINITION, Enricher, detect_hints
from .knowledge import KnowledgeEntry, KnowledgeStore, VocabularyEntry, normalize_key
from .learning import DEFINITION as LEARN_DEFINITION
from .learning import ENRICHMENT, FACT, CALCULATION, USAGE, LearnEvent
from .reasoning import PathwayResult
from .router import CONVERSATIONAL, FACTUAL, PERSONAL

logger = logging.getLogger(__name__)

# ── Stop words (excluded from relevance scoring) ─────────────────────────────
_STOP: Set[str] = frozenset({
    'what', 'whats', "what's", 'is', 'are', 'how', 'why', 'when', 'where', 'who',
    'the', 'a', 'an', 'of', 'to', 'in', 'and', 'or', 'for', 'do', 'does', 'i',
    'my', 'me', 'can', 'you', 'your', 'it', 'its', 'was', 'be', 'been', 'this',
    'that', 'with', 'from', 'at', 'by', 'on', 'as', 'up', 'about', 'into',
    'than', 'then', 'so', 'if', 'but', 'not', 'no', 'we', 'they', 'he', 'she',
    'will', 'would', 'could', 'should', 'have', 'has', 'had', 'just', 'also',
    'very', 'tell', 'know', 'remember', 'please', 'which', 'there', 'here',
    'define', 'meaning', 'mean', 'am', "i'm", 'im', 'did', 'anything',
})

_WORD_RE = re.compile(r"[a-z0-9']+")


def content_words(text: str) -> List[str]:
    """Lower-cased words of ``text`` with stop words removed, in order"""
    seen = []
    for word in _WORD_RE.findall((text or "").lower()):
        word = word.strip("'")
        if word and word not in _STOP and word not in seen:
            seen.append(word)
    return seen


# ═══════════════════════════════════════════════════════════════════════════════
# § 1  ARITHMETIC
# ═══════════════════════════════════════════════════════════════════════════════

def run_arithmetic(text: str) -> PathwayResult:
    """Evaluate arithmetic and propose remembering a solved calculation"""
    result = arithmetic.evaluate(text)
    if result.data is not None:
        data = result.data
        result.proposals.append(LearnEvent(
            CALCULATION,
            data["expression"],
            data["answer"],
            confidence=config.ARITHMETIC_MATCH_CONFIDENCE,
            category="calculation",
            details={"steps": list(data["steps"]), "method": data["method"]},
        ))
    return result


# ═══════════════════════════════════════════════════════════════════════════════
# § 2  VOCABULARY / FACTS
# ═══════════════════════════════════════════════════════════════════════════════

_TERM_PATTERNS = tuple(re.compile(p, re.I) for p in (
    r"^\s*(?:please\s+)?define\s+(.+)$",
    r"\bwhat\s+does\s+(.+?)\s+mean\b",
    r"\b(?:meaning|definition)\s+of\s+(.+)$",
    r"\b(?:synonyms?|antonyms?|opposite)\s+(?:for|of)\s+(.+)$",
    r"\bpronunciation\s+of\s+(.+)$",
    r"\bpronounce\s+(.+)$",
    r"\bspell\s+(.+)$",
    r"\b(?:plural|past\s+tense|grammar)\s+of\s+(.+)$",
    r"\btell\s+me\s+about\s+(.+)$",
    r"\b(?:who|what)\s+(?:is|was|are|were)\s+(.+)$",
    r"\bwhat's\s+(.+)$",
))
_ARTICLE_RE = re.compile(r"^(?:a|an|the)\s+", re.I)
_FIRST_PERSON_SUBJECT_RE = re.compile(r"^(?:my|me|myself|i|i'm|your|you|yourself)\b", re.I)
_LETTER_RE = re.compile(r"[a-z]", re.I)


def extract_term(text: str) -> Optional[str]:
    """
    The word or topic a factual question is about, or None.

    First-person subjects ("my name") and subjects without letters are
    not terms; neither is anything the arithmetic rules understand.
    """
    if not isinstance(text, str):
        return None
    for pattern in _TERM_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        term = match.group(1).strip().strip("\"'").rstrip("?.!").strip().strip("\"'")
        term = _ARTICLE_RE.sub("", term).strip()
        if not term or not _LETTER_RE.search(term):
            return None
        if _FIRST_PERSON_SUBJECT_RE.match(term):
            return None
        if arithmetic.match_rule(arithmetic.normalize_expression(term)):
            return None
        return normalize_key(term)
    return None


class VocabularyFactsPathway:
    """
    Resolves a term through seed data, learned data and finally the
    external lookup services, stopping at the first tier that answers.
    """

    def __init__(self, store: KnowledgeStore, dictionary=None, encyclopedia=None):
        self.store = store
        self.dictionary = dictionary
        self.encyclopedia = encyclopedia
        self.enricher = Enricher(dictionary)

    # ── Helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _tier_confidence(entry: KnowledgeEntry) -> float:
        if entry.source == config.SOURCE_SEED:
            if entry.collection == config.VOCABULARY:
                return config.SEED_VOCABULARY_CONFIDENCE
            return config.SEED_FACT_CONFIDENCE
        if entry.collection == config.VOCABULARY:
            return config.LEARNED_VOCABULARY_CONFIDENCE
        return config.LEARNED_FACT_CONFIDENCE

    @staticmethod
    def _data(entry: KnowledgeEntry, hints: Sequence[str], extra_details=None) -> dict:
        details = dict(entry.details)
        details.update(extra_details or {})
        return {
            "kind": entry.collection,
            "key": entry.key,
            "text": entry.value,
            "category": entry.category,
            "source": entry.source,
            "details": details,
            "hints": list(hints),
        }

    def _exact(self, term: str, tier: str) -> Optional[KnowledgeEntry]:
        for collection in (config.VOCABULARY, config.MATHEMATICS, config.FACTS):
            entry = self.store.get(collection, term)
            if entry is None:
                continue
            is_seed = entry.source == config.SOURCE_SEED
            if (tier == config.SOURCE_SEED) == is_seed:
                return entry
        return None

    def _ranked(self, words: List[str], tier: str) -> Optional[Tuple[KnowledgeEntry, float]]:
        best = None
        for collection in (config.FACTS, config.MATHEMATICS):
            hits = self.store.search(collection, words, source_tier=tier,
                                     min_relevance=config.MIN_FACT_RELEVANCE)
            if not hits:
                continue
            top = hits[0]
            if best is None or (
                top["relevance"] > best[1]
                or (top["relevance"] == best[1] and len(top["entry"].key) < len(best[0].key))
            ):
                best = (top["entry"], top["relevance"])
        return best

    def _found(self, entry: KnowledgeEntry, hints, trace: List[str], fresh: bool = False,
               confidence: float = None) -> PathwayResult:
        confidence = self._tier_confidence(entry) if confidence is None else confidence
        proposals = []
        extra = {}
        if entry.collection == config.VOCABULARY:
            outcome = self.enricher.enrich(entry, hints, fresh=fresh)
            trace.extend(outcome.trace)
            if outcome.changed:
                extra = outcome.details
                proposals.append(LearnEvent(ENRICHMENT, entry.key, details=dict(outcome.details)))
            proposals.append(LearnEvent(USAGE, entry.key, value=False))
        return PathwayResult(FACTUAL, confidence, self._data(entry, hints, extra), trace, proposals)

    # ── External lookups ─────────────────────────────────────────────────────

    def _lookup_word(self, term: str, hints, trace: List[str]) -> Optional[PathwayResult]:
        if self.dictionary is None or " " in term:
            return None
        trace.append(f"Looking up \"{term}\" in the dictionary")
        found = self.dictionary.lookup(term)
        if found is None:
            trace.append(f"Dictionary has no entry for \"{term}\"")
            return None
        details = found.to_details()
        entry = VocabularyEntry(term, found.definition, category="learned",
                                source=config.SOURCE_ONLINE,
                                confidence=config.ONLINE_CONFIDENCE, details=details)
        result = self._found(entry, hints, trace, fresh=True, confidence=config.ONLINE_CONFIDENCE)
        result.proposals.insert(0, LearnEvent(
            LEARN_DEFINITION, term, found.definition,
            confidence=config.ONLINE_CONFIDENCE, source=config.SOURCE_ONLINE,
            category="learned", details=details,
        ))
        trace.append(f"Learned the definition of \"{term}\" from the dictionary")
        return result

    def _lookup_topic(self, term: str, hints, trace: List[str]) -> Optional[PathwayResult]:
        if self.encyclopedia is None:
            return None
        trace.append(f"Looking up \"{term}\" in the encyclopedia")
        summary = self.encyclopedia.lookup(term)
        if summary is None:
            trace.append(f"Encyclopedia has nothing on \"{term}\"")
            return None
        details = {"title": summary.title, "related_topics": list(summary.related_topics)}
        data = {
            "kind": config.FACTS,
            "key": term,
            "text": summary.extract,
            "category": summary.category,
            "source": config.SOURCE_ONLINE,
            "details": details,
            "hints": list(hints),
        }
        proposal = LearnEvent(
            FACT, term, summary.extract,
            confidence=config.ONLINE_CONFIDENCE, source=config.SOURCE_ONLINE,
            category=summary.category, details=details,
        )
        trace.append(f"Learned about \"{summary.title}\" from the encyclopedia")
        return PathwayResult(FACTUAL, config.ONLINE_CONFIDENCE, data, trace, [proposal])

    # ── Public API ───────────────────────────────────────────────────────────

    def resolve(self, term: Optional[str], query_hints: Iterable[str] = (DEFINITION,),
                text: str = "") -> PathwayResult:
        """
        Resolve ``term`` (or, without a term, the words of ``text``).

        Tiers: seed entries, then learned entries, then the dictionary and
        encyclopedia. Never raises for a miss.
        """
        hints = tuple(query_hints) or (DEFINITION,)
        trace = [f"Factual query: \"{term}\"" if term else "No specific term, searching known facts"]
        words = [w for w in content_words(term or text) if _LETTER_RE.search(w)]
        rank = not term or len(words) > 1

        for tier in (config.SOURCE_SEED, config.SOURCE_LEARNED):
            label = "seed" if tier == config.SOURCE_SEED else "learned"
            if term:
                entry = self._exact(term, tier)
                if entry is not None:
                    trace.append(f"Found \"{term}\" in {label} {entry.collection}")
                    return self._found(entry, hints, trace)
            if rank and words:
                ranked = self._ranked(words, tier)
                if ranked is not None:
                    entry, relevance = ranked
                    trace.append(f"Best {label} match \"{entry.key}\" (relevance {relevance:.2f})")
                    return self._found(entry, hints, trace)
            trace.append(f"Nothing in {label} knowledge")

        if term:
            result = self._lookup_word(term, hints, trace) or self._lookup_topic(term, hints, trace)
            if result is not None:
                return result

        trace.append("No factual answer found")
        return PathwayResult(FACTUAL, config.FACTUAL_MISS_CONFIDENCE, None, trace)

    def run(self, text: str) -> PathwayResult:
        return self.resolve(extract_term(text), detect_hints(text), text=text)


# ═══════════════════════════════════════════════════════════════════════════════
# § 3  PERSONAL MEMORY
# ═══════════════════════════════════════════════════════════════════════════════

def recall(text: str, personal_entries: Sequence[KnowledgeEntry],
           just_learned: Iterable[str] = ()) -> PathwayResult:
    """
    Recall what the user has told us.

    ``just_learned`` holds keys learned from this very message, which turns
    the reply into an acknowledgement.
    """
    trace = ["Checking personal memory"]
    if not personal_entries:
        trace.append("No personal information stored yet; the user could share some")
        return PathwayResult(PERSONAL, config.PERSONAL_EMPTY_CONFIDENCE, None, trace)

    learned = [key for key in just_learned if key]
    if learned:
        by_key = {entry.key: entry for entry in personal_entries}
        facts = [(key, by_key[key].value) for key in learned if key in by_key]
        trace.append(f"Stored new personal information: {', '.join(learned)}")
        return PathwayResult(PERSONAL, config.PERSONAL_MATCH_CONFIDENCE,
                             {"facts": facts, "acknowledged": True}, trace)

    words = content_words(text)
    matched, others = [], []
    for entry in personal_entries:
        haystack = f"{entry.key} {entry.value}".lower()
        (matched if any(word in haystack for word in words) else others).append(entry)

    if matched:
        trace.append(f"Matched {len(matched)} personal fact(s)")
        ordered = matched + others
        confidence = config.PERSONAL_MATCH_CONFIDENCE
    else:
        trace.append("Nothing specific matched; listing what I know")
        ordered = others
        confidence = config.PERSONAL_UNMATCHED_CONFIDENCE

    facts = [(entry.key, entry.value) for entry in ordered]
    return PathwayResult(PERSONAL, confidence, {"facts": facts, "acknowledged": False}, trace)


# ═══════════════════════════════════════════════════════════════════════════════
# § 4  CONVERSATIONAL
# ═══════════════════════════════════════════════════════════════════════════════

_GREET_RE  = re.compile(
    r'^\s*(hi+|hello+|hey+|howdy|hiya|yo|'
    r'good\s*(morning|afternoon|evening|day))\s*[!?.,]?\s*$', re.I)
_BYE_RE    = re.compile(
    r'^\s*(bye+|goodbye|see\s*you|later|cya|farewell|good\s*night|'
    r'take\s*care|ttyl)\s*[!?.,]?\s*$', re.I)
_THANKS_RE = re.compile(
    r'^\s*(thank(s| you)+|ty|thx|cheers|much\s+appreciated|'
    r'many\s+thanks)\s*(a\s+lot|so\s+much)?\s*[!.,]?\s*$', re.I)
_ABOUT_RE  = re.compile(r'(who|what)\s*(are|is)\s*(you|zac\s*ai)\b\??', re.I)
_HELP_RE   = re.compile(
    r'^\s*('
    r'help|'
    r'(i\s+)?(need|want)\s+(some\s+|your\s+)?help|'
    r'can\s+you\s+help(\s+me)?|'
    r'how\s+can\s+you\s+help(\s+me)?|'
    r'what\s+can\s+you\s+do(\s+for\s+me)?'
    r')\s*[?!.]?\s*$', re.I)

GENERIC = "generic"

SMALL_TALK = {
    'greet':  "Hello! What can I help you with?",
    'bye':    "Goodbye! Come back anytime.",
    'thanks': "You're welcome!",
    'about': (
        "I'm ZacAI, a small assistant that learns as we talk.\n"
        "I can do arithmetic, define words, look up facts and remember things about you."
    ),
    'help': (
        "Here's what I can help with:\n"
        "  - Math             : '3×3+3', '15% of 200', 'sqrt 144', '5!'\n"
        "  - Words            : 'define curious', 'synonyms for happy', 'pronounce friend'\n"
        "  - Facts            : 'what is photosynthesis', 'tell me about the moon'\n"
        "  - About you        : 'my name is Sam', 'what do you remember about me'\n"
        "\nJust ask naturally!"
    ),
    GENERIC: "I understand what you're saying.",
}


def classify_small_talk(text: str) -> str:
    """Return a small-talk key; ``GENERIC`` when nothing specific matched"""
    q = (text or "").strip()
    if _GREET_RE.match(q):
        return 'greet'
    if _BYE_RE.match(q):
        return 'bye'
    if _THANKS_RE.match(q):
        return 'thanks'
    if _ABOUT_RE.search(q):
        return 'about'
    if _HELP_RE.match(q):
        return 'help'
    return GENERIC


def converse(text: str) -> PathwayResult:
    """Small talk; always usable at a fixed confidence"""
    kind = classify_small_talk(text)
    trace = [f"Conversational reply ({kind})"]
    return PathwayResult(CONVERSATIONAL, config.CONVERSATIONAL_CONFIDENCE,
                         {"kind": kind, "reply": SMALL_TALK[kind]}, trace)
