import logging

from flask import Flask
from flask_cors import CORS
from flask_swagger_ui import get_swaggerui_blueprint

from ai_agent_openai import OpenAISummaryAgent
from clients import SerpApiClient, WikipediaClient
from config import settings as default_settings
from photos import PhotoResolver
from pipeline import PersonSummaryPipeline
from rate_limit import RateLimiter
from routes.home.routes import home_bp
from routes.summarize.routes import summarize_bp

SWAGGER_URL = '/api/docs'
API_URL = '/static/openapi.json'


def configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


def build_pipeline(settings, agent=None):
    """Wire the outbound clients into a pipeline"""
    search_client = SerpApiClient(
        api_key=settings.serpapi_api_key,
        api_url=settings.serpapi_url,
        num_results=settings.search_result_count,
        max_links=settings.max_links,
        timeout=settings.http_timeout,
    )
    photo_resolver = PhotoResolver(
        WikipediaClient(api_url=settings.wikipedia_api_url, timeout=settings.http_timeout),
        timeout=settings.http_timeout,
        portrait_filter=settings.photo_portrait_filter,
    )
    if agent is None:
        agent = OpenAISummaryAgent(
            api_key=settings.openai_api_key,
            api_url=settings.openai_api_url,
            model=settings.openai_model,
            summary_words=settings.summary_words,
            timeout=settings.openai_timeout,
        )
    return PersonSummaryPipeline(search_client, photo_resolver, agent)


def create_app(settings=None, pipeline=None, rate_limiter=None):
    if settings is None:
        settings = default_settings
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            'app_name': "Person Summary API Documentation",
            'validatorUrl': None
        }
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)
    app.register_blueprint(home_bp)
    app.register_blueprint(summarize_bp)

    # RateLimiter defines __len__, an empty one is falsy
    if rate_limiter is None:
        rate_limiter = RateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window=settings.rate_limit_window,
            capacity=settings.rate_limit_capacity,
        )
    if pipeline is None:
        pipeline = build_pipeline(settings)
    app.extensions["rate_limiter"] = rate_limiter
    app.extensions["person_summary_pipeline"] = pipeline

    if not settings.serpapi_api_key:
        app.logger.warning("SERPAPI_API_KEY is not set, searches will fail")
    if not settings.openai_api_key:
        app.logger.warning("OPENAI_API_KEY is not set, summaries will fall back to a placeholder")

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5000, debug=False)
