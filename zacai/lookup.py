"""External lookups: dictionary definitions and encyclopedia summaries"""

import re
import time
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup
from requests.exceptions import RequestException, Timeout, ConnectionError

from . import config
from .errors import LookupFailure

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class DictionaryEntry:
    """One word as returned by the dictionary service"""
    word: str
    definition: str
    part_of_speech: str = "unknown"
    examples: List[str] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)
    etymology: str = ""
    phonetic: str = ""
    audio: str = ""

    def to_details(self) -> Dict:
        """Structured extras stored alongside the definition"""
        return {
            "part_of_speech": self.part_of_speech,
            "examples": list(self.examples),
            "synonyms": list(self.synonyms),
            "antonyms": list(self.antonyms),
            "etymology": self.etymology,
            "phonetic": self.phonetic,
            "audio": self.audio,
        }


@dataclass
class TopicSummary:
    """Short encyclopedia summary of one topic"""
    title: str
    extract: str
    category: str = "general"
    related_topics: List[str] = field(default_factory=list)


class _TTLCache:
    """Tiny in-memory cache; entries expire after ``ttl`` seconds"""

    def __init__(self, ttl: float):
        self.ttl = ttl
        self._items: Dict[str, tuple] = {}

    def get(self, key: str):
        item = self._items.get(key)
        if item is None:
            return _MISSING
        stored_at, value = item
        if time.time() - stored_at > self.ttl:
            del self._items[key]
            return _MISSING
        return value

    def set(self, key: str, value):
        self._items[key] = (time.time(), value)

    def clear(self):
        self._items.clear()

    def __len__(self):
        return len(self._items)


class _LookupClient:
    """Shared HTTP plumbing: one session, soft timeout, retry on timeout, per-lookup deadline"""

    def __init__(self, session: requests.Session = None, timeout: float = None,
                 max_retries: int = None, cache_ttl: float = None, deadline: float = None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": config.USER_AGENT})
        self.timeout = config.LOOKUP_TIMEOUT if timeout is None else timeout
        self.max_retries = config.MAX_RETRIES if max_retries is None else max_retries
        self.cache = _TTLCache(config.LOOKUP_CACHE_TTL if cache_ttl is None else cache_ttl)
        self.deadline = config.LOOKUP_DEADLINE if deadline is None else deadline
        self.clock = time.monotonic
        self._expires_at = None

    def _get_json(self, url: str, params: Dict = None, retries: int = 0) -> Optional[Any]:
        """
        GET ``url`` and decode JSON.

        Returns None for 404 (nothing there); raises LookupFailure for
        everything else that goes wrong.
        """
        timeout = self.timeout
        if self._expires_at is not None:
            remaining = self._expires_at - self.clock()
            if remaining <= 0:
                raise LookupFailure(f"Lookup deadline of {self.deadline}s exceeded before {url}")
            timeout = min(timeout, remaining)

        try:
            response = self.session.get(url, params=params, timeout=timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()

        except Timeout:
            if retries < self.max_retries:
                logger.info(f"Timeout, retrying... ({retries + 1}/{self.max_retries})")
                return self._get_json(url, params, retries + 1)
            raise LookupFailure(f"Timed out after {self.max_retries} retries: {url}")

        except ConnectionError as e:
            raise LookupFailure(f"Connection error for {url}: {e}") from e

        except RequestException as e:
            raise LookupFailure(f"Request failed for {url}: {e}") from e

        except ValueError as e:
            raise LookupFailure(f"Invalid JSON from {url}: {e}") from e

    def _cached(self, key: str, fetch):
        value = self.cache.get(key)
        if value is not _MISSING:
            logger.debug(f"Lookup cache hit: {key}")
            return value
        self._expires_at = self.clock() + self.deadline
        try:
            value = fetch()
        finally:
            self._expires_at = None
        self.cache.set(key, value)
        return value


# ═══════════════════════════════════════════════════════════════════════════════
# § 1  DICTIONARY
# ═══════════════════════════════════════════════════════════════════════════════

class DictionaryClient(_LookupClient):
    """
    Word lookups against the free dictionary API (dictionaryapi.dev).

    ``lookup`` never raises: any failure is logged and reported as a miss.
    """

    def __init__(self, base_url: str = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = (base_url or config.DICTIONARY_API_URL).rstrip("/")

    def _fetch(self, word: str) -> Optional[Dict]:
        try:
            data = self._get_json(f"{self.base_url}/{quote(word)}")
        except LookupFailure as e:
            logger.warning(f"Dictionary lookup failed for '{word}': {e}")
            return None
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0]
        return None

    def lookup(self, word: str) -> Optional[DictionaryEntry]:
        """Look up a single word"""
        word = str(word or "").strip().lower()
        if not word:
            return None
        logger.info(f"Dictionary lookup: {word}")
        data = self._cached(f"dictionary:{word}", lambda: self._fetch(word))
        if data is None:
            return None
        try:
            return self._parse(word, data)
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Unexpected dictionary payload for '{word}': {e}")
            return None

    @staticmethod
    def _parse(word: str, data: Dict) -> Optional[DictionaryEntry]:
        meanings = data.get("meanings") or []
        if not meanings:
            return None
        first_meaning = meanings[0]
        definitions = first_meaning.get("definitions") or []
        if not definitions or not definitions[0].get("definition"):
            return None

        synonyms: List[str] = []
        antonyms: List[str] = []
        for meaning in meanings:
            for group in [meaning] + list(meaning.get("definitions") or []):
                for s in group.get("synonyms") or []:
                    if s not in synonyms:
                        synonyms.append(s)
                for a in group.get("antonyms") or []:
                    if a not in antonyms:
                        antonyms.append(a)

        phonetic = data.get("phonetic") or ""
        audio = ""
        for item in data.get("phonetics") or []:
            phonetic = phonetic or item.get("text") or ""
            audio = audio or item.get("audio") or ""

        return DictionaryEntry(
            word=word,
            definition=definitions[0]["definition"],
            part_of_speech=first_meaning.get("partOfSpeech") or "unknown",
            examples=[d["example"] for d in definitions if d.get("example")][:3],
            synonyms=synonyms,
            antonyms=antonyms,
            etymology=data.get("origin") or "",
            phonetic=phonetic,
            audio=audio,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# § 2  ENCYCLOPEDIA
# ═══════════════════════════════════════════════════════════════════════════════

_CATEGORY_KEYWORDS = (
    ("science", ("science", "scientific", "research", "study")),
    ("history", ("history", "historical", "ancient", "century")),
    ("technology", ("technology", "computer", "digital", "software")),
    ("nature", ("nature", "animal", "plant", "species")),
    ("astronomy", ("space", "planet", "star", "galaxy")),
    ("mathematics", ("mathematics", "equation", "formula", "theorem")),
)

_COMMON_WORDS = {
    "The", "This", "That", "These", "Those", "A", "An", "And", "Or", "But",
    "In", "On", "At", "To", "For", "Of", "With", "By", "From", "About", "Into",
    "Through", "During", "Before", "After", "Above", "Below", "Up", "Down",
    "Out", "Off", "Over", "Under", "Again", "Further", "Then", "Once", "Here",
    "There", "When", "Where", "Why", "How", "All", "Any", "Both", "Each", "Few",
    "More", "Most", "Other", "Some", "Such", "It", "Its", "He", "She", "They",
    "His", "Her", "Their", "As", "Is", "Was", "It's",
}

_CAPITALISED_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")


def categorize_content(text: str) -> str:
    """Rough domain tag from keyword bands; first band that matches wins"""
    lowered = (text or "").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"


def extract_related_topics(text: str, limit: int = 5) -> List[str]:
    """Capitalised phrases that are probably names of related topics"""
    topics: List[str] = []
    for phrase in _CAPITALISED_RE.findall(text or ""):
        if phrase in _COMMON_WORDS or phrase in topics:
            continue
        topics.append(phrase)
        if len(topics) >= limit:
            break
    return topics


def clean_snippet(html: str) -> str:
    """Strip the highlight markup MediaWiki puts into search snippets"""
    if not html:
        return ""
    text = BeautifulSoup(html, "lxml").get_text(" ", strip=True)
    return re.sub(r"\s+", " ", text).strip()


class EncyclopediaClient(_LookupClient):
    """
    Topic summaries from Wikipedia.

    Tries the REST summary endpoint first, then the search API to find the
    right page title. ``lookup`` never raises.
    """

    def __init__(self, summary_url: str = None, search_url: str = None, **kwargs):
        super().__init__(**kwargs)
        self.summary_url = (summary_url or config.WIKIPEDIA_SUMMARY_URL).rstrip("/")
        self.search_url = search_url or config.WIKIPEDIA_SEARCH_URL

    def _summary(self, title: str) -> Optional[Dict]:
        try:
            data = self._get_json(f"{self.summary_url}/{quote(title.replace(' ', '_'))}")
        except LookupFailure as e:
            logger.warning(f"Encyclopedia summary failed for '{title}': {e}")
            return None
        if isinstance(data, dict) and data.get("type") != "disambiguation" and data.get("extract"):
            return data
        return None

    def _search(self, query: str) -> Optional[Dict]:
        params = {
            "action": "query",
            "format": "json",
            "list": "search",
            "srsearch": query,
            "srlimit": 1,
        }
        try:
            data = self._get_json(self.search_url, params=params)
        except LookupFailure as e:
            logger.warning(f"Encyclopedia search failed for '{query}': {e}")
            return None
        try:
            return data["query"]["search"][0]
        except (KeyError, IndexError, TypeError):
            return None

    def _fetch(self, topic: str) -> Optional[Dict]:
        summary = self._summary(topic)
        if summary:
            return {"title": summary.get("title") or topic, "extract": summary["extract"]}

        logger.info(f"Direct lookup failed for '{topic}', trying search...")
        hit = self._search(topic)
        if not hit or not hit.get("title"):
            return None
        summary = self._summary(hit["title"])
        if summary:
            return {"title": summary.get("title") or hit["title"], "extract": summary["extract"]}
        snippet = clean_snippet(hit.get("snippet", ""))
        if snippet:
            return {"title": hit["title"], "extract": snippet}
        return None

    def lookup(self, topic: str) -> Optional[TopicSummary]:
        """Summarise a topic"""
        topic = re.sub(r"\s+", " ", str(topic or "")).strip()
        if not topic:
            return None
        logger.info(f"Encyclopedia lookup: {topic}")
        data = self._cached(f"encyclopedia:{topic.lower()}", lambda: self._fetch(topic))
        if data is None:
            return None
        extract = data["extract"].strip()
        return TopicSummary(
            title=data["title"],
            extract=extract,
            category=categorize_content(extract),
            related_topics=extract_related_topics(extract),
        )
