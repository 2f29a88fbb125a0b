"""Configuration module for ZacAI"""

import os
from pathlib import Path

# Base directories
BASE_DIR = Path(os.environ.get("ZACAI_HOME", Path.home() / ".zacai"))
DATA_DIR = BASE_DIR / "data"
KNOWLEDGE_DIR = DATA_DIR / "knowledge"

# Knowledge collections, one storage file per collection
VOCABULARY = "vocabulary"
MATHEMATICS = "mathematics"
FACTS = "facts"
PERSONAL = "personal"
COLLECTIONS = (VOCABULARY, MATHEMATICS, FACTS, PERSONAL)

# Entry provenance
SOURCE_SEED = "seed"
SOURCE_LEARNED = "learned"
SOURCE_ONLINE = "online"
SOURCES = (SOURCE_SEED, SOURCE_LEARNED, SOURCE_ONLINE)

# Lookup settings
USER_AGENT = "ZacAI/0.2 (+https://github.com/zacai/zacai)"
LOOKUP_TIMEOUT = 4  # seconds, soft: expiry is treated as a miss
LOOKUP_DEADLINE = 8  # seconds for one lookup, retries and fallbacks included
MAX_RETRIES = 1
LOOKUP_CACHE_TTL = 24 * 60 * 60  # seconds
DICTIONARY_API_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"
WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary"
WIKIPEDIA_SEARCH_URL = "https://en.wikipedia.org/w/api.php"

# Pathway base weights (router table)
MATHEMATICAL_WEIGHT = 0.9
FACTUAL_WEIGHT = 0.8
PERSONAL_WEIGHT = 0.7
CONVERSATIONAL_WEIGHT = 0.6

# Arithmetic pathway
ARITHMETIC_MATCH_CONFIDENCE = 0.95
ARITHMETIC_NO_MATCH_CONFIDENCE = 0.1
ARITHMETIC_FAILURE_CONFIDENCE = 0.2

# Vocabulary / facts pathway tiers
SEED_VOCABULARY_CONFIDENCE = 0.95
SEED_FACT_CONFIDENCE = 0.9
LEARNED_VOCABULARY_CONFIDENCE = 0.9
LEARNED_FACT_CONFIDENCE = 0.85
ONLINE_CONFIDENCE = 0.8
FACTUAL_MISS_CONFIDENCE = 0.2
MIN_FACT_RELEVANCE = 0.5

# Personal memory pathway
PERSONAL_MATCH_CONFIDENCE = 0.9
PERSONAL_UNMATCHED_CONFIDENCE = 0.6
PERSONAL_EMPTY_CONFIDENCE = 0.3
MAX_PERSONAL_FACTS_SHOWN = 3

# Conversational pathway and synthesis
CONVERSATIONAL_CONFIDENCE = 0.6
PATHWAY_ERROR_CONFIDENCE = 0.1
MIN_USEFUL_CONFIDENCE = 0.3

# Conversation settings
MAX_CONVERSATION_TURNS = 50

# Export document
EXPORT_FORMAT = "zacai-knowledge"
EXPORT_VERSION = 1

# CLI settings
CLI_PROMPT = "You"
CLI_ASSISTANT = "ZacAI"
CLI_WIDTH = 80
