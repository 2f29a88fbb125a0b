"""ZacAI - a conversational assistant that learns as you talk"""

__version__ = "0.2.0"
__author__ = "ZacAI Contributors"
__powered_by__ = "Free Dictionary API & Wikipedia"

from .agent import AgentResponse, ZacAgent

__all__ = ["ZacAgent", "AgentResponse", "__version__"]
