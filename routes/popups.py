"""
Popup Routes Blueprint

Explicit dismissal of a corner popup: writes its flag cookie and sends
the visitor back to the page they came from.
"""

from urllib.parse import urlparse

from flask import Blueprint, abort, current_app, redirect, request

from extensions import limiter

popups_bp = Blueprint('popups', __name__, url_prefix='/popups')


def _safe_next(target):
    """Only same-site absolute paths are allowed as redirect targets."""
    if not target:
        return '/'
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith('/') or target.startswith('//'):
        return '/'
    return target


@popups_bp.route("/<name>/dismiss", methods=["POST"])
@limiter.limit("30 per minute")
def dismiss(name):
    """Flag a popup as seen for its cool-down window."""
    popup_gate = current_app.extensions['popup_gate']

    flag = popup_gate.dismiss(name)
    if flag is None:
        current_app.logger.warning(f"Unknown popup dismissed: {name}")
        abort(404)

    response = redirect(_safe_next(request.form.get('next')), code=303)
    response.set_cookie(
        flag.name, flag.value, max_age=flag.max_age, expires=flag.expires, path='/', samesite='Lax'
    )
    current_app.logger.info(f"Popup dismissed: {name}")
    return response
