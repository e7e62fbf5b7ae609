import json
import os

import click
from werkzeug.datastructures import MultiDict

from . import db
from .auth import ARTICLE_PERMISSIONS
from .errors import ValidationError
from .models import Article, Permission, User
from .slugs import unique_slug
from .store import ArticleStore
from .uploads import ImageStorage
from .validation import validate_article


def ensure_permissions(names=ARTICLE_PERMISSIONS):
    out = []
    for name in names:
        p = db.session.execute(db.select(Permission).filter_by(name=name)).scalars().first()
        if p is None:
            p = Permission(name=name)
            db.session.add(p)
        out.append(p)
    db.session.commit()
    return out


def import_articles(items, author=None):
    """Create articles from dicts with ``title``/``content``/``image``.

    Items failing the same rules as the admin form are skipped. Returns the
    new ids.
    """
    store = ArticleStore()
    ids = []
    for idx, item in enumerate(items):
        if not isinstance(item, dict):
            click.echo(f"[warn] skipping item {idx}: not an object")
            continue
        form = MultiDict({
            "title": str(item.get("title") or ""),
            "content": str(item.get("content") or item.get("text") or ""),
        })
        try:
            data = validate_article(form, MultiDict())
        except ValidationError as e:
            problems = "; ".join(m for msgs in e.errors.values() for m in msgs)
            click.echo(f"[warn] skipping item {idx}: {problems}")
            continue
        article = store.create({
            "title": data["title"],
            "slug": unique_slug(item.get("slug") or data["title"], store.slug_exists),
            "content": data["content"],
            "image": item.get("image"),
            "author_id": author.id if author else None,
        })
        ids.append(article.id)
    return ids


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create tables and the article permissions."""
        db.create_all()
        perms = ensure_permissions()
        click.echo(f"tables ready, {len(perms)} permissions")

    @app.cli.command("create-user")
    @click.argument("name")
    @click.argument("email")
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    @click.option("--permission", "permissions", multiple=True, type=click.Choice(ARTICLE_PERMISSIONS))
    @click.option("--all-permissions", is_flag=True, help="Grant every article permission.")
    def create_user(name, email, password, permissions, all_permissions):
        """Create a user that can sign in to the admin area."""
        email = email.strip().lower()
        if db.session.execute(db.select(User).filter_by(email=email)).scalars().first():
            raise click.ClickException(f"user {email} already exists")
        user = User(name=name, email=email)
        user.set_password(password)
        user.permissions = ensure_permissions(ARTICLE_PERMISSIONS if all_permissions else permissions)
        db.session.add(user)
        db.session.commit()
        click.echo(f"created user {user.id} <{email}> with {len(user.permissions)} permissions")

    @app.cli.command("check-articles")
    def check_articles():
        """Report empty articles and images missing on disk."""
        images = ImageStorage(app.config["UPLOAD_FOLDER"])
        total = ArticleStore().count()
        empty = db.session.execute(
            db.select(Article).filter((Article.content == None) | (Article.content == ""))  # noqa: E711
        ).scalars().all()
        missing = [
            a for a in db.session.execute(db.select(Article).filter(Article.image != None)).scalars()  # noqa: E711
            if not images.exists(a.image)
        ]
        click.echo(f"Total: {total}")
        click.echo(f"Empty content: {len(empty)}")
        for a in empty:
            click.echo(f"- {a.slug} | {(a.title or '')[:80]}")
        click.echo(f"Missing images: {len(missing)}")
        for a in missing:
            click.echo(f"- {a.slug} | {a.image}")

    @app.cli.command("import-articles")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    @click.option("--author", "author_email", help="Email of the user to attribute the articles to.")
    def import_articles_cmd(path, author_email):
        """Import a JSON list of articles."""
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        items = raw.get("articles", []) if isinstance(raw, dict) else raw
        author = None
        if author_email:
            author = db.session.execute(
                db.select(User).filter_by(email=author_email.strip().lower())
            ).scalars().first()
            if author is None:
                raise click.ClickException(f"no user {author_email}")
        ids = import_articles(items, author=author)
        click.echo(f"Imported {len(ids)} articles from {os.path.basename(path)}.")
