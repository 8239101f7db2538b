from flask import Blueprint, current_app, render_template

home_bp = Blueprint("home", __name__)


@home_bp.route("/", methods=["GET"], endpoint="index")
def index():
    settings = current_app.config["SETTINGS"]
    return render_template("index.html", max_topic_length=min(35, settings.max_topic_length))
