from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from . import db
from .errors import NotFoundError, PersistenceError
from .models import Article


@dataclass
class Page:
    items: List[Any]
    page: int
    per_page: int
    total: int

    @property
    def pages(self) -> int:
        if not self.total:
            return 1
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    def to_dict(self, item: Optional[Callable[[Any], Any]] = None) -> Dict[str, Any]:
        return {
            "data": [item(i) for i in self.items] if item else list(self.items),
            "current_page": self.page,
            "last_page": self.pages,
            "per_page": self.per_page,
            "total": self.total,
            "prev_page": self.page - 1 if self.has_prev else None,
            "next_page": self.page + 1 if self.has_next else None,
        }


def _like_escape(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ArticleStore:
    """All article reads and writes go through here."""

    def __init__(self, session=None):
        self.session = session or db.session

    def get(self, article_id) -> Optional[Article]:
        return self.session.get(Article, article_id)

    def get_or_404(self, article_id) -> Article:
        article = self.get(article_id)
        if article is None:
            raise NotFoundError(f"Article {article_id} not found.")
        return article

    def find_by_slug(self, slug: str) -> Optional[Article]:
        stmt = db.select(Article).options(selectinload(Article.author)).filter_by(slug=slug)
        return self.session.execute(stmt).scalars().first()

    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        stmt = db.select(Article.id).filter(Article.slug == slug)
        if exclude_id:
            stmt = stmt.filter(Article.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def create(self, fields: Dict[str, Any]) -> Article:
        article = Article(**fields)
        self.session.add(article)
        self._commit()
        return article

    def update(self, article: Article, fields: Dict[str, Any]) -> Article:
        for k, v in fields.items():
            setattr(article, k, v)
        self._commit()
        return article

    def delete(self, article: Article) -> None:
        self.session.delete(article)
        self._commit()

    def search(self, search: Optional[str] = None, page: int = 1, per_page: int = 10) -> Page:
        stmt = db.select(Article).options(selectinload(Article.author))
        if search:
            stmt = stmt.filter(Article.title.ilike(f"%{_like_escape(search)}%", escape="\\"))
        return self._paginate(stmt, page, per_page)

    def latest(self, page: int = 1, per_page: int = 6) -> Page:
        return self._paginate(db.select(Article), page, per_page)

    def suggestions(self, exclude_slug: str, limit: int = 2) -> List[Article]:
        stmt = (
            db.select(Article)
            .filter(Article.slug != exclude_slug)
            .order_by(Article.created_at.desc(), Article.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def count(self) -> int:
        return self.session.execute(db.select(db.func.count(Article.id))).scalar_one()

    def _paginate(self, stmt, page: int, per_page: int) -> Page:
        stmt = stmt.order_by(Article.created_at.desc(), Article.id.desc())
        p = db.paginate(stmt, page=page, per_page=per_page, error_out=False, count=True)
        return Page(items=list(p.items), page=p.page, per_page=p.per_page, total=p.total or 0)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError() from e
