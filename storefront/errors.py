import logging
from flask import Blueprint
from werkzeug.exceptions import HTTPException
from storefront.exceptions import StorefrontError
from storefront.utils.responses import error

errors_bp = Blueprint("errors_bp", __name__)

@errors_bp.app_errorhandler(StorefrontError)
def handle_storefront_error(e):
    if e.status >= 500:
        logging.error("Storefront error: %s", e.message)
    return error(e.message, status=e.status, code=e.code)

@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, code=e.code)

@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    return error(
        "An unexpected error occurred. Please try again later.",
        status=500,
        code=500,
    )
