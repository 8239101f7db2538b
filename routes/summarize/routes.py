"""
# Summarize Person Route

POST /api/summarize-person {"topic": "..."}

validate -> rate limit -> search -> photo + summary
"""

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from rate_limit import get_client_ip, rate_limited_response
from validators import SummarizeRequestBody

logger = logging.getLogger(__name__)

summarize_bp = Blueprint("summarize", __name__)


@summarize_bp.route("/api/summarize-person", methods=["POST"], endpoint="summarize_person")
def summarize_person():
    settings = current_app.config["SETTINGS"]

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Missing topic"}), 400

    topic = data.get("topic")
    if topic is None or (isinstance(topic, str) and topic.strip() == ""):
        return jsonify({"error": "Missing topic"}), 400

    try:
        body = SummarizeRequestBody.model_validate(
            {"topic": topic},
            context={"max_topic_length": settings.max_topic_length},
        )
    except ValidationError:
        return jsonify({"error": "Invalid topic"}), 400

    client_ip = get_client_ip(settings.trust_proxy_headers)
    limited = rate_limited_response(current_app.extensions["rate_limiter"], client_ip)
    if limited is not None:
        return limited

    logger.info("Received topic: %s", body.topic)
    result = current_app.extensions["person_summary_pipeline"].run(body.topic)

    return jsonify(result.to_body()), result.status_code


@summarize_bp.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    # details stay in the log only
    logger.exception("API error")
    return jsonify({"error": "Internal server error"}), 500
