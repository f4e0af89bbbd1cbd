from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, g, jsonify, request

from ..common.validators import require_tab_id
from ..core.constants import TAB_ID_HEADER
from ..core.exceptions import SessionNotFound, ValidationError
from ..container import Container
from .manager import SessionManager

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int):
    return jsonify({"status": "error", "message": message}), status_code


def _manager_for_request(container: Container) -> SessionManager:
    return container.session_manager(require_tab_id(request.headers.get(TAB_ID_HEADER)))


def _status_payload(manager: SessionManager, expired_reason=None) -> dict:
    record = manager.record()
    return {
        "status": "success",
        "active": expired_reason is None and record.has_token,
        "expired_reason": expired_reason.value if expired_reason else None,
        "roles": sorted(role.value for role in manager.roles()),
        "record": record.to_public_dict(),
    }


def session_required(container: Container):
    """Decorator factory: the tab must hold a live session (fail-closed)."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                manager = _manager_for_request(container)
                reason = manager.expire_if_needed()
                if reason is not None:
                    raise SessionNotFound(f"Session expired ({reason.value})")
            except ValidationError as e:
                return _error(str(e), 400)
            except SessionNotFound as e:
                return _error(str(e), 401)
            g.session_manager = manager
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register(app: Flask, container: Container) -> None:
    @app.route("/api/session", methods=["POST"], endpoint="session_begin")
    def session_begin():
        data = request.get_json(silent=True) or {}
        try:
            manager = _manager_for_request(container)
            attributes = data.get("attributes") or {}
            if not isinstance(attributes, dict):
                raise ValidationError("attributes must be an object")
            manager.begin(data.get("token") or "", attributes=attributes)
            reason = manager.expire_if_needed()
            if reason is not None:
                return _error(f"Session expired ({reason.value})", 401)
            return jsonify(_status_payload(manager)), 201
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Cannot start session")
            return _error("Server error", 500)

    @app.route("/api/session", methods=["GET"], endpoint="session_status")
    def session_status():
        try:
            manager = _manager_for_request(container)
            reason = manager.expire_if_needed()
            return jsonify(_status_payload(manager, reason)), 200
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Cannot read session status")
            return _error("Server error", 500)

    @app.route("/api/session/activity", methods=["POST"], endpoint="session_activity")
    def session_activity():
        try:
            manager = _manager_for_request(container)
            if not manager.touch():
                return _error("Session expired", 401)
            return jsonify({"status": "success", "last_activity": manager.clock.last_activity()}), 200
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Cannot record session activity")
            return _error("Server error", 500)

    @app.route("/api/session", methods=["DELETE"], endpoint="session_end")
    def session_end():
        try:
            manager = _manager_for_request(container)
            manager.end()
            return jsonify({"status": "success"}), 200
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Cannot end session")
            return _error("Server error", 500)

    def _preferences_payload(manager: SessionManager) -> dict:
        prefs = manager.preferences
        return {
            "status": "success",
            "user_preferences": prefs.user_preferences(),
            "recent_items": prefs.recent_items(),
            "theme": prefs.theme(),
            "last_visited_page": prefs.last_visited_page(),
            "session_start_time": prefs.session_start_time(),
        }

    @app.route("/api/session/preferences", methods=["GET"], endpoint="session_preferences")
    @session_required(container)
    def session_preferences():
        return jsonify(_preferences_payload(g.session_manager)), 200

    @app.route("/api/session/preferences", methods=["PATCH"], endpoint="session_preferences_update")
    @session_required(container)
    def session_preferences_update():
        data = request.get_json(silent=True) or {}
        prefs = g.session_manager.preferences
        try:
            if "user_preferences" in data:
                prefs.update_user_preferences(data["user_preferences"])
            if "theme" in data:
                prefs.set_theme(data["theme"])
            if "last_visited_page" in data:
                prefs.update_last_visited_page(data["last_visited_page"])
            if "recent_item" in data:
                prefs.add_recent_item(data["recent_item"])
            return jsonify(_preferences_payload(g.session_manager)), 200
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception:
            logger.exception("Cannot update session preferences")
            return _error("Server error", 500)
