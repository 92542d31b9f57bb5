from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..common.datetime_utils import parse_iso_date, parse_iso_datetime
from ..container import Container
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..users.service import UNSET
from .serializers import bucket_to_dict, event_to_dict, summary_to_dict, user_to_dict

logger = logging.getLogger(__name__)


def _error(code: str, message: str, status: int):
    return jsonify({"error": code, "message": message}), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _optional_datetime(name: str):
    value = request.args.get(name)
    return parse_iso_datetime(value) if value else None


def register(app: Flask, container: Container) -> None:
    """JSON routes over the ledger services.

    The caller is assumed to be authenticated upstream; user ids are trusted.
    """

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        if isinstance(exc, NotFoundError):
            logger.debug("[api] not found: %s", exc)
            return _error("not_found", str(exc), 404)
        if isinstance(exc, ConflictError):
            logger.warning("[api] conflict: %s", exc)
            return _error("conflict", str(exc), 409)
        if isinstance(exc, ValidationError):
            logger.warning("[api] validation error: %s", exc)
            return _error("validation_error", str(exc), 400)
        logger.warning("[api] bad request: %s", exc)
        return _error("bad_request", str(exc), 400)

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return _error(exc.name.lower().replace(" ", "_"), exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("[api] internal server error")
        return _error("internal_server_error", "An internal server error occurred", 500)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    def create_user():
        data = _json_body()
        user = container.identity_service.create_user(
            data.get("name", ""),
            data.get("email", ""),
            data.get("picture"),
        )
        return jsonify(user_to_dict(user)), 201

    @app.route("/api/users", methods=["GET"], endpoint="lookup_user")
    def lookup_user():
        email = request.args.get("email", "")
        user = container.identity_service.lookup_active_by_email(email)
        if not user:
            raise NotFoundError(f"No active user with email {email}")
        return jsonify(user_to_dict(user))

    @app.route("/api/users/<user_id>", methods=["GET"], endpoint="get_user")
    def get_user(user_id: str):
        return jsonify(user_to_dict(container.identity_service.get_user(user_id)))

    @app.route("/api/users/<user_id>", methods=["PATCH"], endpoint="update_user")
    def update_user(user_id: str):
        data = _json_body()
        user = container.identity_service.update_profile(
            user_id,
            name=data.get("name"),
            email=data.get("email"),
            picture=data["picture"] if "picture" in data else UNSET,
        )
        return jsonify(user_to_dict(user))

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="delete_user")
    def delete_user(user_id: str):
        container.identity_service.soft_delete_user(user_id)
        return "", 204

    @app.route("/api/events", methods=["POST"], endpoint="append_event")
    def append_event():
        data = _json_body()
        # recorded_at is stamped by the server, never taken from the body.
        event = container.ledger_service.append_event(
            str(data.get("user_id") or ""),
            data.get("event_type"),
            parse_iso_datetime(data.get("event_time")),
        )
        return jsonify(event_to_dict(event)), 201

    @app.route("/api/events/<event_id>", methods=["GET"], endpoint="get_event")
    def get_event(event_id: str):
        return jsonify(event_to_dict(container.ledger_service.get_event(event_id)))

    @app.route("/api/users/<user_id>/events", methods=["GET"], endpoint="list_events")
    def list_events(user_id: str):
        limit = request.args.get("limit")
        try:
            limit_value = int(limit) if limit else None
        except ValueError:
            raise ValidationError("limit must be an integer") from None

        events = container.ledger_service.list_events_for_user(
            user_id,
            from_event_time=_optional_datetime("from"),
            to_event_time=_optional_datetime("to"),
            limit=limit_value,
        )
        return jsonify({"user_id": user_id, "events": [event_to_dict(e) for e in events]})

    @app.route("/api/users/<user_id>/summary", methods=["GET"], endpoint="daily_summary")
    def daily_summary(user_id: str):
        day = parse_iso_date(request.args.get("date", ""))
        summary = container.summary_service.daily_summary(user_id, request.args.get("zone"), day)
        return jsonify(summary_to_dict(summary))

    @app.route("/api/users/<user_id>/buckets", methods=["GET"], endpoint="day_buckets")
    def day_buckets(user_id: str):
        start = parse_iso_date(request.args.get("start", ""))
        end = parse_iso_date(request.args.get("end", request.args.get("start", "")))
        buckets = container.temporal_index.day_buckets_for_user(user_id, request.args.get("zone"), start, end)
        return jsonify({"user_id": user_id, "buckets": [bucket_to_dict(b) for b in buckets]})
