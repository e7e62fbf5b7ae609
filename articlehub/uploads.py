import os
import uuid
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import safe_join

ALLOWED_EXTENSIONS = ("jpg", "jpeg", "png", "webp")
# extension -> what sniff_image reports for it
IMAGE_KINDS = {"jpg": "jpeg", "jpeg": "jpeg", "png": "png", "webp": "webp"}
MAX_IMAGE_KB = 2048


def has_upload(upload: Optional[FileStorage]) -> bool:
    # browsers send an empty part when no file was picked
    return upload is not None and bool(upload.filename)


def extension_of(filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    return ext[1:].lower()


def upload_size(upload: FileStorage) -> int:
    stream = upload.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def sniff_image(upload: FileStorage) -> Optional[str]:
    """Return ``jpeg``/``png``/``webp`` from the file's magic bytes, else None."""
    stream = upload.stream
    pos = stream.tell()
    stream.seek(0)
    head = stream.read(12)
    stream.seek(pos)
    if head[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if head[:8] == b"\x89PNG\r\n\x1a\n":
        return "png"
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "webp"
    return None


class ImageStorage:
    """Stores uploaded article images under a public root.

    Paths handed back are relative to the root (``articles/<hex>.png``), which
    is what the article row keeps and what ``/storage/<path>`` serves.
    """

    def __init__(self, root: str):
        self.root = root

    def save(self, upload: FileStorage, folder: str = "articles") -> str:
        name = f"{uuid.uuid4().hex}.{extension_of(upload.filename)}"
        target_dir = os.path.join(self.root, folder)
        os.makedirs(target_dir, exist_ok=True)
        upload.stream.seek(0)
        upload.save(os.path.join(target_dir, name))
        return f"{folder}/{name}"

    def path_for(self, relative: str) -> Optional[str]:
        return safe_join(self.root, relative)

    def exists(self, relative: str) -> bool:
        path = self.path_for(relative)
        return bool(path) and os.path.isfile(path)

    def delete(self, relative: Optional[str]) -> bool:
        if not relative:
            return False
        path = self.path_for(relative)
        if not path or not os.path.isfile(path):
            return False
        os.remove(path)
        return True
