from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import api_errors, json_body
from ..core.constants import DEFAULT_ADMIN_LIST_LIMIT, DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _parse_date(value: str | None, field_name: str):
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    @api_errors
    def api_checkin():
        data = json_body()
        logger.debug("Check-in payload: %s", data)
        record = service.check_in(
            user_id=data.get("userId"),
            timestamp=data.get("timestamp"),
            checkin_id=data.get("checkinId"),
            punctuality_status=data.get("punctualityStatus"),
            half_day_status=data.get("halfDayStatus"),
            email=data.get("email"),
        )
        return jsonify({"message": "Checkin recorded successfully.", "record": record.to_dict()}), 201

    @app.route("/api/checkout", methods=["POST"], endpoint="api_checkout")
    @api_errors
    def api_checkout():
        data = json_body()
        record = service.check_out(
            user_id=data.get("userId"),
            checkin_id=data.get("checkinId"),
            timestamp=data.get("timestamp"),
        )
        return jsonify({"message": "Checkout recorded", "record": record.to_dict()}), 200

    @app.route("/api/status/<user_id>", methods=["GET"], endpoint="api_status")
    @api_errors
    def api_status(user_id: str):
        return jsonify(service.get_status(user_id).to_dict()), 200

    @app.route("/api/history/<user_id>", methods=["GET"], endpoint="api_history")
    @api_errors
    def api_history(user_id: str):
        records = service.get_history(
            user_id,
            limit=request.args.get("limit", DEFAULT_HISTORY_LIMIT),
            include_all=_is_truthy(request.args.get("all")),
        )
        return jsonify([r.to_dict() for r in records]), 200

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="api_admin_attendance")
    @api_errors
    def api_admin_attendance():
        listing = service.list_attendance(
            status=request.args.get("status"),
            user_id=request.args.get("userId"),
            start=_parse_date(request.args.get("start"), "start"),
            end=_parse_date(request.args.get("end"), "end"),
            limit=request.args.get("limit", DEFAULT_ADMIN_LIST_LIMIT),
        )
        return jsonify(listing.to_dict()), 200

    @app.route("/api/admin/attendance/<int:record_id>", methods=["DELETE"], endpoint="api_admin_delete_attendance")
    @api_errors
    def api_admin_delete_attendance(record_id: int):
        service.delete_record(record_id)
        return jsonify({"message": "Attendance record deleted", "recordId": record_id}), 200
