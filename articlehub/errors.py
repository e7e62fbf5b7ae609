from flask import jsonify, render_template, request


class ArticleError(Exception):
    status_code = 500
    message = "Something went wrong."

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ValidationError(ArticleError):
    """Input rejected; ``errors`` maps each field to its messages."""

    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = errors
        # set by the view so the form can be shown again
        self.view = None
        self.props = {}


class AuthorizationError(ArticleError):
    status_code = 403
    message = "This action is unauthorized."


class NotFoundError(ArticleError):
    status_code = 404
    message = "Not found."


class PersistenceError(ArticleError):
    status_code = 500
    message = "The article could not be saved."


def wants_json():
    if request.headers.get("X-Inertia"):
        return True
    best = request.accept_mimetypes.best_match(["text/html", "application/json"])
    return best == "application/json"


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def _validation(e):
        app.logger.warning("validation failed on %s: %s", request.path, sorted(e.errors))
        if wants_json() or not e.view:
            return jsonify(message=e.message, errors=e.errors), e.status_code
        from .render import render_view
        return render_view(e.view, status=e.status_code, errors=e.errors, old=request.form.to_dict(), **e.props)

    @app.errorhandler(ArticleError)
    def _article_error(e):
        if e.status_code >= 500:
            app.logger.error("%s on %s: %s", type(e).__name__, request.path, e.message)
        else:
            app.logger.warning("%s on %s", type(e).__name__, request.path)
        return _error_response(e.status_code, e.message)

    @app.errorhandler(404)
    def _not_found(e):
        return _error_response(404, NotFoundError.message)

    @app.errorhandler(413)
    def _too_large(e):
        return _error_response(413, "The uploaded file is too large.")


def _error_response(status, message):
    if wants_json():
        return jsonify(message=message), status
    return render_template("error.html", status=status, message=message), status