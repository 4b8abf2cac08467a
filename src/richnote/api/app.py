"""FastAPI application for the richnote local JSON API.

Stateless: every request carries the raw text and selection of the host
widget, and the response carries the next text, selection and the effects the
host has to apply on its next frame.
"""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .. import __version__
from ..core.model import Alignment, ArticleStyle
from ..core.scanner import scan
from ..core.session import (
    DocumentState,
    MARKUP_KINDS,
    Transition,
    apply_image,
    apply_markup,
    apply_remove,
    apply_style,
    on_selection_change,
)
from ..format.views import (
    attributes_from,
    block_view,
    bounds_view,
    node_view,
    selection_view,
    style_view,
)

EDIT_OPS = ("style", "image", "remove", *MARKUP_KINDS)


class StyleModel(BaseModel):
    font: str | None = None
    size: int | None = None
    color: str | None = None
    background: str | None = None


class TextRequest(BaseModel):
    text: str


class SelectionRequest(BaseModel):
    text: str
    start: int
    stop: int
    article_style: StyleModel | None = None


class EditRequest(SelectionRequest):
    op: str
    style: StyleModel | None = None
    src: str | None = None
    align: str = "left"
    description: str | None = None
    level: int = 1


def _article(model: StyleModel | None) -> ArticleStyle:
    if model is None:
        return ArticleStyle()
    return ArticleStyle(
        tuple(attributes_from(model.font, model.size, model.color, model.background))
    )


def _state(runtime: Any, req: SelectionRequest) -> DocumentState:
    if min(req.start, req.stop) < 0 or max(req.start, req.stop) > len(req.text):
        raise HTTPException(status_code=422, detail="Selection is outside the text")
    state = DocumentState.create(
        req.text,
        article_style=runtime.config.article.merge(_article(req.article_style).attributes),
        undo_depth=runtime.config.editor.undo_depth,
        snap=runtime.config.editor.snap_selection,
    )
    return on_selection_change(state, req.start, req.stop).state


def _transition_view(transition: Transition) -> dict[str, Any]:
    state = transition.state
    current = None
    if state.current is not None:
        bounds, node = state.current
        current = {"bounds": bounds_view(bounds), "annotation": node_view(node)}
    return {
        "text": state.text,
        "selection": selection_view(state.selection),
        "current": current,
        "article_style": style_view(state.article_style),
        "effects": [
            {"set_selection": {"start": e.start, "stop": e.stop}}
            for e in transition.effects
        ],
    }


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> Any:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with parser and config
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Richnote API",
        description="Annotation engine for a host text widget",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.post("/scan")
    async def scan_text(req: TextRequest, auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """Annotation decomposition of the text."""
        return [node_view(n) for n in scan(req.text)]

    @app.post("/index")
    async def index(req: TextRequest, auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """Every annotation with its offsets."""
        state = DocumentState.create(req.text)
        return [
            {"bounds": bounds_view(bounds), "annotation": node_view(node)}
            for bounds, node in state.index.items()
        ]

    @app.post("/blocks")
    async def blocks(req: TextRequest, auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """Rendering-ready block tree."""
        return [block_view(b) for b in runtime.render_blocks(req.text)]

    @app.post("/check")
    async def check(req: SelectionRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Resolve a selection and report which edits it allows."""
        state = _state(runtime, req)
        view = _transition_view(on_selection_change(state, req.start, req.stop))
        view["plain_markdown"] = state.can_plain_markdown_style
        view["custom_style"] = state.can_custom_style
        return view

    @app.post("/edit")
    async def edit(req: EditRequest, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Apply one edit operation."""
        if req.op not in EDIT_OPS:
            raise HTTPException(status_code=400, detail=f"Unknown op {req.op}")
        try:
            state = _state(runtime, req)
            if req.op == "style":
                style = req.style or StyleModel()
                attrs = attributes_from(style.font, style.size, style.color, style.background)
                if not attrs:
                    raise HTTPException(status_code=400, detail="No style attributes given")
                transition = apply_style(state, attrs)
            elif req.op == "image":
                if not req.src:
                    raise HTTPException(status_code=400, detail="Image requires src")
                transition = apply_image(
                    state, req.src, Alignment(req.align), req.description
                )
            elif req.op == "remove":
                transition = apply_remove(state)
            else:
                transition = apply_markup(state, req.op, req.level)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return _transition_view(transition)

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
