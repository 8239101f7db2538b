import abc
from abc import ABC

NO_SUMMARY = "No summary returned."


class SummaryError(Exception):
    """The language model call failed"""


class SummaryAgent(ABC):
    @abc.abstractmethod
    def summarize(self, topic, links):
        """Return a short summary of ``topic`` based on ``links``."""
        raise NotImplementedError

    @abc.abstractmethod
    def _build_prompt(self, topic, links):
        """Compose the user prompt sent to the model."""
        raise NotImplementedError

    @abc.abstractmethod
    def _call_completion_api(self, prompt):
        """Send the composed prompt to an LLM provider and return the text response."""
        raise NotImplementedError
