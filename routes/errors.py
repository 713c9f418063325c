from flask import Blueprint, current_app, jsonify, render_template, request
from sqlalchemy.exc import SQLAlchemyError
from configs import db

errors_bp = Blueprint("errors", __name__)


def _wants_json() -> bool:
    return "/api" in request.path or request.is_json


@errors_bp.app_errorhandler(SQLAlchemyError)
def handle_store_error(error: SQLAlchemyError):
    # leave the session usable for the next request
    db.session.rollback()
    current_app.logger.exception("Database error on %s", request.path, exc_info=error)
    if _wants_json():
        return jsonify({"error": "Database unavailable, please retry."}), 503
    return render_template("errors/store_error.html", path=request.path), 503
