from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/mark-absent", methods=["GET", "POST"], endpoint="api_mark_absent")
    @api_errors
    def api_mark_absent():
        summary = container.reconciliation_service.run()
        return jsonify(summary.to_dict()), 200
