from flask import jsonify
from werkzeug.exceptions import HTTPException
from dms.domain.invariants.exceptions import InvariantViolation

def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        response = jsonify({
            "error": "InvariantViolation",
            "message": str(error)
        })
        response.status_code = 400
        return response

    # abort() from services (optimistic lock, first_or_404) answers in JSON too
    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        # Redirects raised by routing pass through untouched
        if error.code is None or error.code < 400:
            return error

        response = jsonify({
            "error": error.name,
            "message": error.description
        })
        response.status_code = error.code
        return response
