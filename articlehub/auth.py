from flask import Blueprint, current_app, flash, g, redirect, request, session, url_for

from . import db
from .errors import AuthorizationError, ValidationError
from .models import User
from .render import render_view

auth_bp = Blueprint("auth", __name__)

ARTICLES_INDEX = "articles index"
ARTICLES_CREATE = "articles create"
ARTICLES_EDIT = "articles edit"
ARTICLES_DELETE = "articles delete"

ARTICLE_PERMISSIONS = (ARTICLES_INDEX, ARTICLES_CREATE, ARTICLES_EDIT, ARTICLES_DELETE)


def load_current_user():
    uid = session.get("user_id")
    g.user = db.session.get(User, uid) if uid is not None else None


def current_user():
    return g.get("user")


def authorize(permission):
    """Raise AuthorizationError unless the signed-in user holds ``permission``."""
    user = current_user()
    if user is None or not user.has_permission(permission):
        current_app.logger.warning(
            "denied %r to %s", permission, f"user {user.id}" if user else "guest"
        )
        raise AuthorizationError()
    return user


def _safe_next(target):
    # only same-site relative paths
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return None


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        email = (request.form.get("email") or "").strip().lower()
        password = request.form.get("password") or ""
        user = db.session.execute(db.select(User).filter_by(email=email)).scalars().first()
        if user is None or not user.check_password(password):
            e = ValidationError({"email": ["These credentials do not match our records."]})
            e.view = "Auth/Login"
            raise e
        session.clear()
        session["user_id"] = user.id
        current_app.logger.info("user %s signed in", user.id)
        return redirect(_safe_next(request.args.get("next")) or url_for("admin.index"))
    return render_view("Auth/Login")


@auth_bp.post("/logout")
def logout():
    session.clear()
    flash("Signed out.", "success")
    return redirect(url_for("main.index"))
