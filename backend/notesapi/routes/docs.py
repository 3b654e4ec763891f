"""
RapiDoc viewer for the generated OpenAPI document.

Swagger UI and ReDoc come with FastAPI (see `create_app`); RapiDoc has no
built-in helper, so it is served as a small HTML page pointing at the same
OpenAPI JSON.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

router = APIRouter(include_in_schema=False)

RAPIDOC_JS_URL = "https://unpkg.com/rapidoc/dist/rapidoc-min.js"


def get_rapidoc_html(openapi_url: str, title: str) -> str:
    return f"""<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<script type="module" src="{RAPIDOC_JS_URL}"></script>
</head>
<body>
<rapi-doc spec-url="{openapi_url}" render-style="read" show-header="false"></rapi-doc>
</body>
</html>
"""


@router.get("/rapidoc", response_class=HTMLResponse)
async def rapidoc(request: Request) -> HTMLResponse:
    app = request.app
    return HTMLResponse(get_rapidoc_html(app.openapi_url, f"{app.title} - RapiDoc"))
