"""Knowledge synthesizer: picks the pathway result the reply is built from"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from . import config
from .knowledge import KnowledgeEntry
from .reasoning import PathwayResult
from .router import CONVERSATIONAL

logger = logging.getLogger(__name__)

NAME_KEY = "name"


@dataclass
class Synthesis:
    """The chosen answer plus everything the response generator needs"""
    pathway: str
    confidence: float
    data: Any = None
    trace: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    user_name: Optional[str] = None


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def user_name_from(personal_entries: Sequence[KnowledgeEntry]) -> Optional[str]:
    for entry in personal_entries or ():
        if entry.key == NAME_KEY and entry.value:
            return str(entry.value)
    return None


def synthesize(results: Sequence[PathwayResult],
               personal_entries: Sequence[KnowledgeEntry] = ()) -> Synthesis:
    """
    Choose the most confident usable result.

    Conversational results are only used when no other pathway reached
    ``MIN_USEFUL_CONFIDENCE``. Ties go to the pathway the router put first.
    """
    chosen = None
    for result in results:
        if result.pathway == CONVERSATIONAL:
            continue
        if result.confidence < config.MIN_USEFUL_CONFIDENCE:
            continue
        if chosen is None or result.confidence > chosen.confidence:
            chosen = result

    if chosen is None:
        chosen = next((r for r in results if r.pathway == CONVERSATIONAL), None)

    user_name = user_name_from(personal_entries)
    sources = [r.pathway for r in results]

    if chosen is None:
        logger.debug("No pathway results to synthesize")
        return Synthesis(CONVERSATIONAL, 0.0, None, ["No pathway produced a result"], sources, user_name)

    trace = [f"Selected {chosen.pathway} pathway (confidence {_clamp(chosen.confidence):.2f})"]
    return Synthesis(
        pathway=chosen.pathway,
        confidence=_clamp(chosen.confidence),
        data=chosen.data,
        trace=trace,
        sources=sources,
        user_name=user_name,
    )
