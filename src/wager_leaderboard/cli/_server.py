from flask import Flask, Response, abort, jsonify

from wager_leaderboard.cli._output import outcome_to_dict
from wager_leaderboard.config import Settings
from wager_leaderboard.services.pipeline import LeaderboardPipeline


def create_leaderboard_app(settings: Settings, pipelines: dict[str, LeaderboardPipeline]) -> Flask:
    """Create a Flask app serving leaderboards as JSON.

    Every GET /leaderboard/<name> is a fresh pipeline run, the way a page
    load or tab activation triggers one in the browser. Nothing is cached
    between requests.
    """
    app = Flask(__name__)

    @app.route("/")
    def index() -> Response:
        return jsonify(
            {
                "leaderboards": [
                    {"name": name, "title": settings.sources[name].title, "url": f"/leaderboard/{name}"}
                    for name in pipelines
                ]
            }
        )

    @app.route("/leaderboard/<name>")
    def leaderboard(name: str) -> Response:
        pipeline = pipelines.get(name)
        if pipeline is None:
            abort(404, description=f"Unknown leaderboard '{name}'")
        outcome = pipeline.run()
        return jsonify(outcome_to_dict(outcome, settings.sources[name]))

    return app
