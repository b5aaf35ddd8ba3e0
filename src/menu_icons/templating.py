"""Jinja2 environment for the admin screen templates."""

from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("menu_icons", "templates"),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    return env


def render_template(name: str, **context: Any) -> Markup:
    """Render a package template to trusted markup."""
    return Markup(get_environment().get_template(name).render(**context))
