"""Host adapter for the critique pipeline: settings, agent hooks and CLI."""

from critique_agent.config import AgentSettings, get_settings
from critique_agent.extension import CarContext, CritiqueExtension
from critique_agent.responder import respond, run_agent_turn

__all__ = [
    "AgentSettings",
    "CarContext",
    "CritiqueExtension",
    "get_settings",
    "respond",
    "run_agent_turn",
]
