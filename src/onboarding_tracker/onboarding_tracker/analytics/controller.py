from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_BUCKET_WIDTH
from ..core.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from ..observability.events import LogEvent
from ..observability.structured import create_logger

logger = create_logger("api.analytics")


def register(app: Flask, container: Container) -> None:
    analytics = container.analytics_service
    journeys = container.journey_service

    def _store_down(e: StoreUnavailableError, message: str):
        logger.error(LogEvent.STORE_UNAVAILABLE, message, {"path": request.path}, exc_info=e)
        return jsonify({"error": message}), 503

    @app.route("/api/analytics/student-journey/<student_id>", endpoint="student_journey")
    def student_journey(student_id: str):
        try:
            return jsonify(journeys.get_journey(student_id).to_dict())
        except NotFoundError:
            return jsonify({"error": "Student not found"}), 404
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to fetch student")

    @app.route("/api/analytics/student-journey", endpoint="student_journeys")
    def student_journeys():
        try:
            return jsonify([j.to_dict() for j in journeys.list_journeys()])
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to fetch students")

    @app.route("/api/analytics/summary", endpoint="analytics_summary")
    def analytics_summary():
        try:
            return jsonify(analytics.summary().to_dict())
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to fetch summary data")

    @app.route("/api/analytics/pending-counts", endpoint="analytics_pending_counts")
    def analytics_pending_counts():
        try:
            return jsonify(analytics.pending_counts().to_dict())
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to analyze pending counts")

    @app.route("/api/analytics/peak-hours", endpoint="analytics_peak_hours")
    def analytics_peak_hours():
        interval = request.args.get("interval") or app.config.get("DEFAULT_BUCKET_WIDTH", DEFAULT_BUCKET_WIDTH)
        try:
            return jsonify(analytics.peak_time_of_day(interval).to_dict())
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to fetch scan data")

    @app.route("/api/analytics/stage-timing", endpoint="analytics_stage_timing")
    def analytics_stage_timing():
        try:
            return jsonify(analytics.stage_timing().to_dict())
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to analyze stage timing")

    @app.route("/api/analytics/volunteer-stats", endpoint="analytics_volunteer_stats")
    def analytics_volunteer_stats():
        try:
            return jsonify(analytics.leaderboard().to_dict())
        except StoreUnavailableError as e:
            return _store_down(e, "Failed to fetch volunteer data")
