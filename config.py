import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def env_flag(name, default=False):
    """Read a boolean flag from the environment"""
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in ("true", "1", "yes", "on"):
        return True
    elif value in ("false", "0", "no", "off", ""):
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def env_int(name, default):
    value = os.environ.get(name)
    return default if value in (None, "") else int(value)


def env_float(name, default):
    value = os.environ.get(name)
    return default if value in (None, "") else float(value)


@dataclass(frozen=True)
class Settings:
    serpapi_api_key: str = ""
    serpapi_url: str = "https://serpapi.com/search.json"
    search_result_count: int = 20
    max_links: int = 20

    openai_api_key: str = ""
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout: float = 30.0
    summary_words: int = 200

    wikipedia_api_url: str = "https://en.wikipedia.org/w/api.php"
    http_timeout: float = 5.0
    photo_portrait_filter: bool = False

    rate_limit_max_requests: int = 10
    rate_limit_window: int = 2 * 60 * 60  # 2 hours in seconds
    rate_limit_capacity: int = 10_000
    trust_proxy_headers: bool = True

    max_topic_length: int = 100
    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        """Build settings from the process environment (and .env)"""
        defaults = cls()
        return cls(
            serpapi_api_key=os.environ.get("SERPAPI_API_KEY", ""),
            serpapi_url=os.environ.get("SERPAPI_URL", defaults.serpapi_url),
            search_result_count=env_int("SEARCH_RESULT_COUNT", defaults.search_result_count),
            max_links=env_int("MAX_LINKS", defaults.max_links),
            openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
            openai_api_url=os.environ.get("OPENAI_API_URL", defaults.openai_api_url),
            openai_model=os.environ.get("OPENAI_MODEL", defaults.openai_model),
            openai_timeout=env_float("OPENAI_TIMEOUT", defaults.openai_timeout),
            summary_words=env_int("SUMMARY_WORDS", defaults.summary_words),
            wikipedia_api_url=os.environ.get("WIKIPEDIA_API_URL", defaults.wikipedia_api_url),
            http_timeout=env_float("HTTP_TIMEOUT", defaults.http_timeout),
            photo_portrait_filter=env_flag("PHOTO_PORTRAIT_FILTER", defaults.photo_portrait_filter),
            rate_limit_max_requests=env_int("RATE_LIMIT_MAX_REQUESTS", defaults.rate_limit_max_requests),
            rate_limit_window=env_int("RATE_LIMIT_WINDOW", defaults.rate_limit_window),
            rate_limit_capacity=env_int("RATE_LIMIT_CAPACITY", defaults.rate_limit_capacity),
            trust_proxy_headers=env_flag("TRUST_PROXY_HEADERS", defaults.trust_proxy_headers),
            max_topic_length=env_int("MAX_TOPIC_LENGTH", defaults.max_topic_length),
            log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        )


settings = Settings.from_env()
