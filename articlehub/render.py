from flask import get_flashed_messages, jsonify, render_template, request

from .errors import wants_json


def template_for(component: str) -> str:
    # "Public/Articles/Show" -> "public/articles/show.html"
    return component.lower() + ".html"


def render_view(component: str, status: int = 200, **props):
    """Render a named view with its props.

    JSON clients get the props back as data; browsers get the Jinja template
    mapped from the component name.
    """
    if wants_json():
        payload = {
            "component": component,
            "props": {**props, "flash": _flash_payload()},
            "url": request.full_path.rstrip("?"),
        }
        return jsonify(payload), status
    return render_template(template_for(component), **props), status


def _flash_payload():
    return {category: message for category, message in get_flashed_messages(with_categories=True)}
