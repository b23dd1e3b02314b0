from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import ScanStatus, VisitorCountStatus
from ..core.exceptions import StoreUnavailableError, ValidationError
from ..journey.projector import project
from ..observability.events import LogEvent
from ..observability.structured import create_logger

logger = create_logger("api.scans")


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/scan/arrival/visitors", methods=["POST"], endpoint="scan_visitor_count")
    def scan_visitor_count():
        data = _json_body()
        try:
            outcome = container.stage_guard.set_visitor_count(data.get("studentId"), data.get("visitorCount"))
        except ValidationError as e:
            logger.warning(LogEvent.API_REQUEST_REJECTED, str(e), {"path": request.path})
            return jsonify({"error": str(e)}), 400
        except StoreUnavailableError as e:
            logger.error(LogEvent.STORE_UNAVAILABLE, "Failed to update visitor count", exc_info=e)
            return jsonify({"error": "Failed to update visitor count"}), 503

        if outcome.status == VisitorCountStatus.NOT_FOUND:
            return jsonify({"error": "Student not found"}), 404
        if outcome.status == VisitorCountStatus.PRECONDITION_FAILED:
            return jsonify({"error": "Student must be marked as arrived first"}), 400

        return jsonify({
            "message": "Visitor count updated successfully",
            "student": project(outcome.record).to_dict(),
        }), 200

    @app.route("/api/scan/<checkpoint>", methods=["POST"], endpoint="scan_checkpoint")
    def scan_checkpoint(checkpoint: str):
        data = _json_body()
        try:
            outcome = container.stage_guard.apply(data.get("studentId"), checkpoint, data.get("volunteerName"))
        except ValidationError as e:
            logger.warning(LogEvent.API_REQUEST_REJECTED, str(e), {"path": request.path})
            return jsonify({"error": str(e)}), 400
        except StoreUnavailableError as e:
            logger.error(LogEvent.STORE_UNAVAILABLE, "Failed to update student stage", {"checkpoint": checkpoint}, exc_info=e)
            return jsonify({"error": "Failed to update student stage"}), 503

        if outcome.status == ScanStatus.NOT_FOUND:
            return jsonify({"error": "Student not found"}), 404

        label = outcome.checkpoint.label
        if outcome.status == ScanStatus.ALREADY_COMPLETED:
            return jsonify({
                "error": f"{label} already completed",
                "completedAt": outcome.prior_completed_at,
                "verifiedBy": outcome.prior_completed_by,
            }), 409

        return jsonify({
            "message": f"{label} recorded successfully",
            "student": project(outcome.record).to_dict(),
        }), 200
