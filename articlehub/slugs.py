from typing import Callable, Optional

from slugify import slugify as _slugify

FALLBACK_SLUG = "article"
# the column is String(300); the rest is room for "-N" suffixes
SLUG_MAX = 250


def slugify(title: str) -> str:
    return _slugify(title or "", max_length=SLUG_MAX) or FALLBACK_SLUG


def unique_slug(title: str, exists: Callable[[str, Optional[int]], bool], exclude_id: Optional[int] = None) -> str:
    """Slug for ``title`` that ``exists`` reports as free.

    Collisions get a numeric suffix, ``base-1``, ``base-2``, ... and the first
    free one wins. ``exclude_id`` lets an article keep a slug it already owns.
    """
    base = slugify(title)
    slug = base
    counter = 1
    while exists(slug, exclude_id):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
