"""
# Person summary pipeline

search (fatal) -> photo + summary (concurrent, degradable) -> response

Every stage reports a StageOutcome. The pipeline decides which outcomes may
degrade and which abort the request, and returns a single PipelineResult
that the route turns into JSON.
"""

import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional

from ai_agent_openai import NO_SUMMARY, SummaryError
from clients.search import SearchError
from photos import NO_PHOTO

logger = logging.getLogger(__name__)


class StageStatus(enum.Enum):
    OK = "ok"
    DEGRADED = "degraded"
    FATAL = "fatal"


@dataclass
class StageOutcome:
    status: StageStatus
    value: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value):
        return cls(StageStatus.OK, value)

    @classmethod
    def degraded(cls, value, error):
        return cls(StageStatus.DEGRADED, value, error)

    @classmethod
    def fatal(cls, error):
        return cls(StageStatus.FATAL, None, error)


@dataclass
class PipelineResult:
    """Tagged success/error result of one summary request"""

    status_code: int
    summary: Optional[str] = None
    photo_url: Optional[str] = None
    photo_uncertain: bool = False
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def success(cls, summary, photo):
        return cls(200, summary=summary, photo_url=photo.url, photo_uncertain=photo.uncertain)

    @classmethod
    def failure(cls, status_code, error):
        return cls(status_code, error=error)

    def to_body(self):
        if not self.ok:
            return {"error": self.error}
        return {
            "summary": self.summary,
            "photoUrl": self.photo_url,
            "photoUncertain": self.photo_uncertain,
        }


class PersonSummaryPipeline:
    def __init__(self, search_client, photo_resolver, agent):
        self.search_client = search_client
        self.photo_resolver = photo_resolver
        self.agent = agent

    def run(self, topic) -> PipelineResult:
        search = self._search(topic)
        if search.status is StageStatus.FATAL:
            return PipelineResult.failure(502, "Failed to fetch search results")

        results = search.value
        links = results.links
        if not links:
            return PipelineResult.failure(404, "No search results found")

        # pool is per request; requests never wait on each other's workers
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="summary") as executor:
            photo_future = executor.submit(self._photo, topic, results)
            summary_future = executor.submit(self._summary, topic, links)

            summary = summary_future.result()
            photo = photo_future.result()

        for name, outcome in (("summary", summary), ("photo", photo)):
            if outcome.status is StageStatus.DEGRADED:
                logger.warning("Degraded %s for %r: %s", name, topic, outcome.error)

        return PipelineResult.success(summary.value, photo.value)

    def _search(self, topic):
        try:
            return StageOutcome.ok(self.search_client.search(topic))
        except SearchError as e:
            logger.error("Search failed for %r: %s", topic, e)
            return StageOutcome.fatal(str(e))

    def _photo(self, topic, results):
        try:
            return StageOutcome.ok(
                self.photo_resolver.resolve(topic, results.images, results.first_result)
            )
        except Exception as e:
            logger.exception("Photo resolution failed for %r", topic)
            return StageOutcome.degraded(NO_PHOTO, str(e))

    def _summary(self, topic, links):
        try:
            text = self.agent.summarize(topic, links)
        except SummaryError as e:
            logger.error("Summary failed for %r: %s", topic, e)
            return StageOutcome.degraded(NO_SUMMARY, str(e))
        except Exception as e:
            logger.exception("Summary failed for %r", topic)
            return StageOutcome.degraded(NO_SUMMARY, str(e))
        if not text or not text.strip():
            return StageOutcome.degraded(NO_SUMMARY, "empty summary")
        return StageOutcome.ok(text)
