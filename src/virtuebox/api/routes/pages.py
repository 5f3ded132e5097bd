"""Page shells for browser navigation.

Access control for these paths happens in the route gate middleware;
the handlers only serve the page shell.
"""

import jinja2
from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["Pages"], include_in_schema=False)

_PAGE_TEMPLATE = jinja2.Template(
    """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>{{ title }} | VirtueBox</title></head>
<body><main id="app" data-page="{{ page }}"><h1>{{ title }}</h1></main></body>
</html>
""",
    autoescape=True,
)


def _render(page: str, title: str) -> HTMLResponse:
    return HTMLResponse(_PAGE_TEMPLATE.render(page=page, title=title))


@router.get("/login", response_class=HTMLResponse)
def login_page() -> HTMLResponse:
    return _render("login", "Sign in")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page() -> HTMLResponse:
    return _render("dashboard", "Dashboard")


@router.get("/partners", response_class=HTMLResponse)
def partners_page() -> HTMLResponse:
    return _render("partners", "Partners")
