from flask import Blueprint, abort, current_app, request, send_from_directory
from markupsafe import Markup

from .errors import NotFoundError
from .render import render_view
from .store import ArticleStore
from .uploads import ImageStorage

main_bp = Blueprint("main", __name__)

PUBLIC_PER_PAGE = 6
EXCERPT_LIMIT = 120
SUGGESTIONS = 2


def excerpt(html, limit=EXCERPT_LIMIT, end="..."):
    text = str(Markup(html or "").striptags())
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + end


def public_summary(a):
    return {
        "id": a.id,
        "title": a.title,
        "slug": a.slug,
        "excerpt": excerpt(a.content),
        "created_at": a.created_at.isoformat() if a.created_at else None,
        "image": a.image,
    }


def suggestion(a):
    return {"id": a.id, "title": a.title, "slug": a.slug, "content": a.content, "image": a.image}


@main_bp.get("/articles")
def index():
    page = request.args.get("page", 1, type=int)
    articles = ArticleStore().latest(page=page, per_page=PUBLIC_PER_PAGE)
    return render_view("Public/Articles/Index", articles=articles.to_dict(public_summary))


@main_bp.get("/articles/<slug>")
def show(slug):
    articles = ArticleStore()
    a = articles.find_by_slug(slug)
    if a is None:
        raise NotFoundError(f"No article with slug {slug!r}.")
    others = articles.suggestions(exclude_slug=slug, limit=SUGGESTIONS)
    return render_view(
        "Public/Articles/Show",
        article=a.to_dict(with_author=True),
        suggestions=[suggestion(o) for o in others],
    )


@main_bp.get("/storage/<path:filename>")
def media(filename):
    images = ImageStorage(current_app.config["UPLOAD_FOLDER"])
    if not images.exists(filename):
        abort(404)
    return send_from_directory(images.root, filename)
