"""
Routes package for AssetGuard
A JSON blueprint over the lifecycle engine; route modules hold no business logic
"""

from flask import Blueprint, jsonify, request
from assetguard.buisness.core.errors import LifecycleDomainError, MissingFieldError
from assetguard.logger import get_logger

logger = get_logger("assetguard.routes")

api = Blueprint('api', __name__, url_prefix='/api')


def json_body(entity_type, *required):
    """
    Return the request's JSON object.

    Raises:
        MissingFieldError: If the body is not a JSON object or lacks a required key
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise MissingFieldError(entity_type, required or ['body'])
    missing = [key for key in required if payload.get(key) in (None, '')]
    if missing:
        raise MissingFieldError(entity_type, missing)
    return payload


@api.errorhandler(LifecycleDomainError)
def handle_domain_error(e):
    logger.info(f"Rejected {request.method} {request.path}: {e}")
    return jsonify({'error': str(e)}), 400


# Import route modules
from . import assets, employees, maintenance, requests, integrity  # noqa: E402,F401
