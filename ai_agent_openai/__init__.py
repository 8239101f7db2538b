from .agent import NO_SUMMARY, SummaryAgent, SummaryError
from .openai_agent import OpenAISummaryAgent


__all__ = [
    "NO_SUMMARY",
    "OpenAISummaryAgent",
    "SummaryAgent",
    "SummaryError",
]
