"""AI Agents package."""

from fiado.agents.ai_agents import (
    ANALYSIS_EMPTY_FALLBACK,
    ANALYSIS_ERROR_FALLBACK,
    REMINDER_EMPTY_FALLBACK,
    REMINDER_ERROR_FALLBACK,
    CollectionAgent,
    ReminderTone,
)

__all__ = [
    "ANALYSIS_EMPTY_FALLBACK",
    "ANALYSIS_ERROR_FALLBACK",
    "REMINDER_EMPTY_FALLBACK",
    "REMINDER_ERROR_FALLBACK",
    "CollectionAgent",
    "ReminderTone",
]
