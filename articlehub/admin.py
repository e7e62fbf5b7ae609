from flask import Blueprint, current_app, flash, redirect, request, url_for

from .auth import ARTICLES_CREATE, ARTICLES_DELETE, ARTICLES_EDIT, ARTICLES_INDEX, authorize
from .errors import PersistenceError, ValidationError
from .render import render_view
from .slugs import unique_slug
from .store import ArticleStore
from .uploads import ImageStorage
from .validation import validate_article

admin_bp = Blueprint("admin", __name__)

PER_PAGE = 10


def _images():
    return ImageStorage(current_app.config["UPLOAD_FOLDER"])


def _validated(view, **props):
    try:
        return validate_article(request.form, request.files)
    except ValidationError as e:
        e.view = view
        e.props = props
        raise


def _back():
    ref = request.referrer
    if ref and ref.startswith(request.host_url):
        return ref
    return url_for("admin.index")


@admin_bp.get("/articles")
def index():
    authorize(ARTICLES_INDEX)
    search = (request.args.get("search") or "").strip() or None
    page = request.args.get("page", 1, type=int)
    articles = ArticleStore().search(search=search, page=page, per_page=PER_PAGE)
    filters = {"search": search} if "search" in request.args else {}
    return render_view(
        "Articles/Index",
        articles=articles.to_dict(lambda a: a.to_dict(with_author=True)),
        filters=filters,
    )


@admin_bp.get("/articles/create")
def create():
    authorize(ARTICLES_CREATE)
    return render_view("Articles/Create")


@admin_bp.post("/articles")
def store():
    user = authorize(ARTICLES_CREATE)
    data = _validated("Articles/Create")

    articles = ArticleStore()
    slug = unique_slug(data["title"], articles.slug_exists)

    image_path = None
    if data["image"] is not None:
        image_path = _images().save(data["image"])

    try:
        article = articles.create({
            "title": data["title"],
            "slug": slug,
            "content": data["content"],
            "author_id": user.id,
            "image": image_path,
        })
    except PersistenceError:
        _images().delete(image_path)
        raise

    current_app.logger.info("article %s created as %r by user %s", article.id, article.slug, user.id)
    flash("Article created.", "success")
    return redirect(url_for("admin.index"), code=303)


@admin_bp.get("/articles/<int:article_id>/edit")
def edit(article_id):
    authorize(ARTICLES_EDIT)
    article = ArticleStore().get_or_404(article_id)
    return render_view("Articles/Edit", article=article.to_dict())


@admin_bp.route("/articles/<int:article_id>", methods=["PUT", "PATCH"])
def update(article_id):
    authorize(ARTICLES_EDIT)
    articles = ArticleStore()
    article = articles.get_or_404(article_id)
    data = _validated("Articles/Edit", article=article.to_dict())

    slug = article.slug
    if data["title"] != article.title:
        slug = unique_slug(data["title"], articles.slug_exists, exclude_id=article.id)

    old_image = article.image
    image_path = old_image
    if data["image"] is not None:
        image_path = _images().save(data["image"])

    try:
        articles.update(article, {
            "title": data["title"],
            "slug": slug,
            "content": data["content"],
            "image": image_path,
        })
    except PersistenceError:
        if image_path != old_image:
            _images().delete(image_path)
        raise

    if image_path != old_image and current_app.config.get("PRUNE_ARTICLE_IMAGES"):
        _images().delete(old_image)

    current_app.logger.info("article %s updated (slug %r)", article.id, article.slug)
    flash("Article updated.", "success")
    return redirect(url_for("admin.index"), code=303)


@admin_bp.route("/articles/<int:article_id>", methods=["DELETE"])
def destroy(article_id):
    authorize(ARTICLES_DELETE)
    articles = ArticleStore()
    article = articles.get_or_404(article_id)
    image = article.image
    articles.delete(article)

    if current_app.config.get("PRUNE_ARTICLE_IMAGES"):
        _images().delete(image)

    current_app.logger.info("article %s deleted", article_id)
    flash("Article deleted.", "success")
    return redirect(_back(), code=303)


@admin_bp.post("/articles/<int:article_id>")
def submit(article_id):
    # HTML forms can only POST; "_method" picks the real verb
    method = (request.form.get("_method") or "PUT").upper()
    if method == "DELETE":
        return destroy(article_id)
    return update(article_id)


@admin_bp.post("/articles/<int:article_id>/delete")
def delete(article_id):
    return destroy(article_id)
