import io

import pytest

from articlehub import create_app, db
from articlehub.auth import ARTICLE_PERMISSIONS
from articlehub.commands import ensure_permissions
from articlehub.models import Article, User

JSON = {"Accept": "application/json"}

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 64
WEBP = b"RIFF\x00\x00\x00\x00WEBPVP8 " + b"\x00" * 64


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "PRUNE_ARTICLE_IMAGES": False,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(permissions=ARTICLE_PERMISSIONS, password="secret-pass", name=None):
        counter["n"] += 1
        with app.app_context():
            user = User(name=name or f"User {counter['n']}", email=f"user{counter['n']}@example.com")
            user.set_password(password)
            user.permissions = ensure_permissions(permissions)
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


def login(client, user_id):
    with client.session_transaction() as s:
        s["user_id"] = user_id


@pytest.fixture
def admin_id(make_user):
    return make_user()


@pytest.fixture
def admin(client, admin_id):
    login(client, admin_id)
    return client


@pytest.fixture
def make_article(app, admin_id):
    def _make(title, content="<p>Body text</p>", slug=None, image=None, created_at=None):
        from articlehub.slugs import slugify
        with app.app_context():
            a = Article(
                title=title,
                slug=slug or slugify(title),
                content=content,
                image=image,
                author_id=admin_id,
            )
            if created_at is not None:
                a.created_at = created_at
            db.session.add(a)
            db.session.commit()
            return a.id
    return _make


def upload(data=PNG, name="photo.png"):
    return (io.BytesIO(data), name)


def fetch(app, article_id):
    with app.app_context():
        a = db.session.get(Article, article_id)
        if a is None:
            return None
        return a.to_dict()
