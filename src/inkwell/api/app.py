"""FastAPI application for the inkwell local JSON API."""

import secrets
from typing import Any

try:
    from fastapi import Depends, FastAPI, HTTPException, Query, Response, Security
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

    FASTAPI_AVAILABLE = True
except ImportError:
    FASTAPI_AVAILABLE = False

from .. import __version__
from ..adapters.sinks import PNG_MIME
from ..adapters.summary import describe_content, summarize_drawing
from ..core.model import (
    DrawingSegment,
    EmptySegment,
    ErrorSegment,
    Note,
    Segment,
    Space,
    TextSegment,
)
from ..thumbnails.export import ExportError


def note_to_dict(note: Note) -> dict[str, Any]:
    return {
        "id": note.id,
        "title": note.title,
        "content": note.content,
        "created_at": note.created_at.isoformat(),
        "space": note.space,
        "space_color": note.space_color,
        "summary": describe_content(note.content),
    }


def segment_to_dict(seg: Segment) -> dict[str, Any]:
    match seg:
        case TextSegment():
            return {"kind": "text", "formatted": seg.formatted, "truncated": seg.truncated}
        case EmptySegment():
            return {"kind": "text", "formatted": seg.formatted, "truncated": False, "empty": True}
        case DrawingSegment():
            summary = summarize_drawing(seg)
            return {
                "kind": "drawing",
                "index": seg.index,
                "element_count": summary.element_count,
                "element_types": summary.element_types,
                "colors": list(summary.colors),
            }
        case ErrorSegment():
            return {"kind": "error", "index": seg.index, "raw": seg.body}


def space_to_dict(space: Space) -> dict[str, Any]:
    return {"id": space.id, "name": space.name, "color": space.color}


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> Any:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with notebook and sinks
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    if not FASTAPI_AVAILABLE:
        raise ImportError("FastAPI not available. Install with: pip install inkwell[api]")

    from .schemas import ExportIn, NoteIn, NotePatch, SearchIn, SpaceIn, TabIn

    notebook = runtime.notebook
    view = notebook.view

    app = FastAPI(
        title="Inkwell API",
        description="Local JSON API for an inkwell notebook",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    # Add CORS middleware if enabled
    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Security setup
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

    def get_note_or_404(note_id: str) -> Note:
        try:
            return view.get_note(note_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Note {note_id} not found") from None

    @app.get("/health")  # type: ignore[misc]
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "rasterizer": runtime.capability.available}

    @app.get("/notes")  # type: ignore[misc]
    async def list_notes(
        scope: str = Query("current", description="current | filtered | all"),
        auth: None = Depends(verify_token),
    ) -> dict[str, Any]:
        """Notes of the current view (tab + search), or a wider scope."""
        if scope == "current":
            notes = view.current_view_notes
        elif scope == "filtered":
            notes = view.filtered_notes
        elif scope == "all":
            notes = view.notes
        else:
            raise HTTPException(status_code=422, detail=f"Unknown scope {scope}")
        return {
            "tab": view.active_tab.value,
            "query": view.search_query,
            "notes": [note_to_dict(n) for n in notes],
        }

    @app.post("/notes", status_code=201)  # type: ignore[misc]
    async def create_note(body: NoteIn, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Create a note."""
        note = notebook.create_note(
            body.title, body.content, space=body.space, space_color=body.space_color
        )
        return note_to_dict(note)

    @app.get("/notes/{note_id}")  # type: ignore[misc]
    async def get_note(note_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Get one note."""
        return note_to_dict(get_note_or_404(note_id))

    @app.patch("/notes/{note_id}")  # type: ignore[misc]
    async def edit_note(
        note_id: str, body: NotePatch, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """Edit title, content or space of a note."""
        get_note_or_404(note_id)
        changes = body.model_dump(exclude_unset=True)
        return note_to_dict(notebook.edit_note(note_id, **changes))

    @app.delete("/notes/{note_id}")  # type: ignore[misc]
    async def delete_note(note_id: str, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Delete a note and its thumbnails."""
        get_note_or_404(note_id)
        notebook.remove_note(note_id)
        return {"deleted": note_id}

    @app.get("/notes/{note_id}/segments")  # type: ignore[misc]
    async def segments(
        note_id: str,
        preview: bool = Query(False, description="Truncate text segments"),
        auth: None = Depends(verify_token),
    ) -> list[dict[str, Any]]:
        """Parsed text/drawing segments of a note."""
        note = get_note_or_404(note_id)
        return [segment_to_dict(s) for s in notebook.parser.segment(note.content, preview=preview)]

    @app.get("/notes/{note_id}/drawings/{index}/thumbnail")  # type: ignore[misc]
    async def thumbnail(note_id: str, index: int, auth: None = Depends(verify_token)) -> Any:
        """PNG preview of one drawing; 204 when none is available."""
        get_note_or_404(note_id)
        try:
            png = await notebook.thumbnail(note_id, index)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Drawing {index} not found") from None
        state = notebook.thumbnails.get(note_id, index).state.value
        if png is None:
            return Response(status_code=204, headers={"X-Thumbnail-State": state})
        return Response(content=png, media_type=PNG_MIME, headers={"X-Thumbnail-State": state})

    @app.post("/notes/{note_id}/drawings/{index}/export")  # type: ignore[misc]
    async def export(
        note_id: str, index: int, body: ExportIn, auth: None = Depends(verify_token)
    ) -> dict[str, Any]:
        """High-resolution export to the clipboard or a file."""
        get_note_or_404(note_id)
        try:
            result = await notebook.export(note_id, index, body.destination)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Drawing {index} not found") from None
        except ExportError as e:
            raise HTTPException(status_code=502, detail=str(e)) from None
        if result is None:
            raise HTTPException(status_code=409, detail="Export unavailable for this drawing")
        return {
            "destination": result.destination.value,
            "strategy": result.strategy,
            "path": str(result.path) if result.path else None,
        }

    @app.put("/search")  # type: ignore[misc]
    async def set_search(body: SearchIn, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Change the search query."""
        view.set_search(body.query)
        return {"query": view.search_query, "count": len(view.current_view_notes)}

    @app.put("/tab")  # type: ignore[misc]
    async def set_tab(body: TabIn, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Switch the active tab."""
        try:
            view.set_tab(body.tab)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from None
        return {"tab": view.active_tab.value, "count": len(view.current_view_notes)}

    @app.get("/spaces")  # type: ignore[misc]
    async def list_spaces(auth: None = Depends(verify_token)) -> list[dict[str, Any]]:
        """All spaces."""
        return [space_to_dict(s) for s in view.spaces]

    @app.post("/spaces", status_code=201)  # type: ignore[misc]
    async def create_space(body: SpaceIn, auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Create a space."""
        space = Space(id=body.id or notebook.idgen.new_id(), name=body.name, color=body.color)
        try:
            view.add_space(space)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e)) from None
        return space_to_dict(space)

    @app.get("/clipboard")  # type: ignore[misc]
    async def clipboard(auth: None = Depends(verify_token)) -> Any:
        """Last PNG written to the clipboard."""
        png = runtime.clipboard.read(PNG_MIME)
        if png is None:
            raise HTTPException(status_code=404, detail="Clipboard is empty")
        return Response(content=png, media_type=PNG_MIME)

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
