from .errors import ValidationError
from .uploads import ALLOWED_EXTENSIONS, IMAGE_KINDS, MAX_IMAGE_KB, extension_of, has_upload, sniff_image, upload_size

TITLE_MIN = 5
TITLE_MAX = 255


def validate_article(form, files):
    """Check an article form; return cleaned ``title``, ``content``, ``image``.

    ``image`` is the upload itself or None. Raises ValidationError with every
    failing field.
    """
    errors = {}

    title = (form.get("title") or "").strip()
    if not title:
        errors.setdefault("title", []).append("The title field is required.")
    elif len(title) < TITLE_MIN:
        errors.setdefault("title", []).append(f"The title field must be at least {TITLE_MIN} characters.")
    elif len(title) > TITLE_MAX:
        errors.setdefault("title", []).append(f"The title field must not be greater than {TITLE_MAX} characters.")

    content = (form.get("content") or "").strip()
    if not content:
        errors.setdefault("content", []).append("The content field is required.")

    image = files.get("image")
    if not has_upload(image):
        image = None
    else:
        problems = _image_errors(image)
        if problems:
            errors["image"] = problems

    if errors:
        raise ValidationError(errors)
    return {"title": title, "content": content, "image": image}


def _image_errors(upload):
    out = []
    kind = sniff_image(upload)
    ext = extension_of(upload.filename)
    if kind is None:
        out.append("The image field must be an image.")
    if ext not in ALLOWED_EXTENSIONS or (kind and IMAGE_KINDS[ext] != kind):
        out.append("The image field must be a file of type: " + ", ".join(ALLOWED_EXTENSIONS) + ".")
    if upload_size(upload) > MAX_IMAGE_KB * 1024:
        out.append(f"The image field must not be greater than {MAX_IMAGE_KB} kilobytes.")
    return out
