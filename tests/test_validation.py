import io

import pytest
from werkzeug.datastructures import FileStorage, MultiDict

from articlehub.errors import ValidationError
from articlehub.validation import validate_article

from conftest import JPEG, PNG, WEBP


def _file(data, name):
    return FileStorage(stream=io.BytesIO(data), filename=name)


def _errors(form, files=None):
    with pytest.raises(ValidationError) as exc:
        validate_article(MultiDict(form), MultiDict(files or {}))
    return exc.value.errors


def test_valid_form_is_cleaned():
    out = validate_article(MultiDict({"title": "  Hello World  ", "content": " <p>x</p> "}), MultiDict())
    assert out == {"title": "Hello World", "content": "<p>x</p>", "image": None}


def test_title_and_content_required():
    errors = _errors({"title": "   ", "content": ""})
    assert errors["title"] == ["The title field is required."]
    assert errors["content"] == ["The content field is required."]


def test_title_length_bounds():
    assert "at least 5" in _errors({"title": "Abcd", "content": "x"})["title"][0]
    assert "greater than 255" in _errors({"title": "a" * 256, "content": "x"})["title"][0]
    validate_article(MultiDict({"title": "Abcde", "content": "x"}), MultiDict())
    validate_article(MultiDict({"title": "a" * 255, "content": "x"}), MultiDict())


def test_only_failing_fields_are_reported():
    errors = _errors({"title": "Valid title", "content": ""})
    assert list(errors) == ["content"]


@pytest.mark.parametrize("data,name", [(PNG, "a.png"), (JPEG, "a.jpg"), (JPEG, "a.JPEG"), (WEBP, "a.webp")])
def test_accepts_supported_images(data, name):
    out = validate_article(
        MultiDict({"title": "Hello World", "content": "x"}),
        MultiDict({"image": _file(data, name)}),
    )
    assert out["image"].filename == name


def test_rejects_wrong_extension():
    errors = _errors({"title": "Hello World", "content": "x"}, {"image": _file(PNG, "a.gif")})
    assert errors["image"] == ["The image field must be a file of type: jpg, jpeg, png, webp."]


def test_rejects_non_image_bytes():
    errors = _errors({"title": "Hello World", "content": "x"}, {"image": _file(b"%PDF-1.4 nope", "a.png")})
    assert "The image field must be an image." in errors["image"]


def test_rejects_image_over_2048_kb():
    big = PNG + b"\x00" * (2048 * 1024)
    errors = _errors({"title": "Hello World", "content": "x"}, {"image": _file(big, "a.png")})
    assert errors["image"] == ["The image field must not be greater than 2048 kilobytes."]


def test_image_of_exactly_2048_kb_passes():
    exact = PNG + b"\x00" * (2048 * 1024 - len(PNG))
    out = validate_article(
        MultiDict({"title": "Hello World", "content": "x"}),
        MultiDict({"image": _file(exact, "a.png")}),
    )
    assert out["image"] is not None


def test_empty_file_part_means_no_image():
    out = validate_article(
        MultiDict({"title": "Hello World", "content": "x"}),
        MultiDict({"image": _file(b"", "")}),
    )
    assert out["image"] is None


def test_rejects_bytes_that_do_not_match_extension():
    errors = _errors({"title": "Hello World", "content": "x"}, {"image": _file(PNG, "a.jpg")})
    assert errors["image"] == ["The image field must be a file of type: jpg, jpeg, png, webp."]
