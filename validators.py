import re

from pydantic import BaseModel, field_validator, ValidationInfo

# letters, whitespace, apostrophes, periods and hyphens only
TOPIC_PATTERN = re.compile(r"[A-Za-z\s'.\-]+")

DEFAULT_MAX_TOPIC_LENGTH = 100


def is_valid_topic(raw):
    """Check that ``raw`` looks like a name"""
    if not isinstance(raw, str) or raw.strip() == "":
        return False
    return TOPIC_PATTERN.fullmatch(raw) is not None


class SummarizeRequestBody(BaseModel):
    """
    Request body of POST /api/summarize-person.

    Pass ``context={"max_topic_length": n}`` to ``model_validate`` to override
    the length cap.
    """

    topic: str

    @field_validator("topic")
    @classmethod
    def topic_must_be_a_name(cls, v, info: ValidationInfo):
        if not is_valid_topic(v):
            raise ValueError("Topic must contain only letters, spaces, apostrophes, periods and hyphens")

        max_length = DEFAULT_MAX_TOPIC_LENGTH
        if info.context:
            max_length = info.context.get("max_topic_length", max_length)

        topic = v.strip()
        if len(topic) > max_length:
            raise ValueError(f"Topic must be at most {max_length} characters long")
        return topic
