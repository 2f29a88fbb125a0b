import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from zacai.agent import ZacAgent
from zacai.knowledge import KnowledgeStore
from zacai.lookup import DictionaryEntry, TopicSummary
from zacai.seed_data import get_seed_records
from zacai.storage import JsonStorage


class FakeDictionaryClient:
    """Stands in for DictionaryClient; counts every lookup"""

    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.calls = []

    def lookup(self, word):
        self.calls.append(word)
        return self.entries.get(word)


class FakeEncyclopediaClient:
    """Stands in for EncyclopediaClient; counts every lookup"""

    def __init__(self, topics=None):
        self.topics = dict(topics or {})
        self.calls = []

    def lookup(self, topic):
        self.calls.append(topic)
        return self.topics.get(topic)


ALGORITHM = DictionaryEntry(
    word="algorithm",
    definition="A finite sequence of well-defined instructions for solving a problem.",
    part_of_speech="noun",
    examples=["The search engine uses a ranking algorithm."],
    synonyms=["procedure", "method"],
    antonyms=[],
    phonetic="/ˈælɡəˌrɪðəm/",
)

EPHEMERAL = DictionaryEntry(
    word="ephemeral",
    definition="Lasting for a very short time.",
    part_of_speech="adjective",
    synonyms=["fleeting", "transient"],
    antonyms=["permanent"],
    phonetic="/ɪˈfɛm(ə)rəl/",
)

QUANTUM = TopicSummary(
    title="Quantum computing",
    extract="Quantum computing is a type of computation that uses quantum bits. IBM and Google build such computers.",
    category="technology",
    related_topics=["Quantum", "Google"],
)


@pytest.fixture
def dictionary():
    return FakeDictionaryClient({"algorithm": ALGORITHM, "ephemeral": EPHEMERAL})


@pytest.fixture
def encyclopedia():
    return FakeEncyclopediaClient({"quantum computing": QUANTUM})


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(tmp_path / "knowledge")


@pytest.fixture
def seeded_store():
    store = KnowledgeStore()
    store.load_seed(get_seed_records())
    return store


@pytest.fixture
def agent(storage, dictionary, encyclopedia):
    """Agent with isolated storage and no network access"""
    return ZacAgent(storage=storage, dictionary=dictionary, encyclopedia=encyclopedia)
