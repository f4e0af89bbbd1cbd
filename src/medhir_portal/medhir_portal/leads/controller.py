from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..session.controller import session_required
from .normalizer import normalize_payload

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leads/normalize", methods=["POST"], endpoint="leads_normalize")
    @session_required(container)
    def leads_normalize():
        data = request.get_json(silent=True)
        payload = data.get("leads") if isinstance(data, dict) else data
        try:
            leads = normalize_payload(payload)
        except Exception:
            logger.exception("Cannot normalize leads")
            return jsonify({"status": "error", "message": "Server error"}), 500
        return jsonify({"status": "success", "count": len(leads), "leads": leads}), 200
