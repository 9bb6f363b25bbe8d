# Overview: Shared JSON error payloads for route handlers.

from flask import jsonify

from .extensions import db


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def internal_error(message: str, exc: Exception):
    """
    500 payload for an unexpected fault at the route boundary.

    Rolls back the session so a half-applied unit of work is never
    committed by a later request.
    """
    db.session.rollback()
    return jsonify({"error": message, "message": str(exc)}), 500
