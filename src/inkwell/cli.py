"""CLI for inkwell - notes with embedded drawings."""

import argparse
import asyncio
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.drawing_parser import DrawingParser
from .adapters.summary import describe_content, summarize_drawing
from .config import load_config
from .core.model import Destination, DrawingSegment, EmptySegment, ErrorSegment, TextSegment
from .runtime import build_runtime
from .thumbnails.export import ExportError
from .thumbnails.pipeline import DrawingThumbnail


def _read(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def cmd_segments(args: argparse.Namespace, rt: Any) -> int:
    """Print the text/drawing segments of a content file."""
    parser = DrawingParser(preview_limit=rt.config.preview.truncate)
    segments = parser.segment(_read(args.file), preview=args.preview)

    if args.json:
        from .api.app import segment_to_dict

        print(json.dumps([segment_to_dict(s) for s in segments], indent=2))
        return 0

    for seg in segments:
        match seg:
            case TextSegment() | EmptySegment():
                suffix = " [truncated]" if seg.truncated else ""
                print(f"text: {seg.formatted}{suffix}")
            case DrawingSegment():
                summary = summarize_drawing(seg)
                kinds = ", ".join(f"{k}×{v}" for k, v in summary.element_types.items())
                print(f"drawing {seg.index + 1}: {summary.element_count} elements ({kinds})")
            case ErrorSegment():
                print(f"drawing {seg.index + 1}: invalid drawing data")
    return 0


def cmd_summary(args: argparse.Namespace, rt: Any) -> int:
    """Print the one-line content summary of a content file."""
    content = _read(args.file)
    summary = describe_content(content)
    if args.json:
        print(json.dumps({"summary": summary}))
    else:
        print(summary)
    return 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Render one drawing of a content file to PNG."""
    if not rt.capability.available:
        print(
            "Error: no rasterizer available. Install with: pip install inkwell[render]",
            file=sys.stderr,
        )
        return 1

    segments = DrawingParser().segment(_read(args.file))
    drawing = next(
        (s for s in segments if isinstance(s, DrawingSegment) and s.index == args.index),
        None,
    )
    if drawing is None:
        print(f"Error: drawing {args.index} not found or invalid", file=sys.stderr)
        return 1

    thumb = DrawingThumbnail(
        rt.capability,
        options=rt.config.thumbnail,
        exporter=rt.notebook.thumbnails.exporter,
        name=f"{args.file}#{args.index}",
    )

    if args.thumbnail:
        png = asyncio.run(thumb.generate(drawing.elements, drawing.app_state))
        if png is None:
            print("Error: thumbnail generation failed", file=sys.stderr)
            return 1
        out = Path(args.out or rt.config.export.filename)
        out.write_bytes(png)
    else:
        try:
            result = asyncio.run(
                thumb.export_high_res(drawing.elements, drawing.app_state, Destination.FILE)
            )
        except ExportError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        if result is None:
            print("Error: drawing is empty", file=sys.stderr)
            return 1
        out = result.path

    if not args.quiet:
        print(f"Wrote {out}")
    return 0


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List notes of a view."""
    view = rt.notebook.view
    with view.graph.batch():
        if args.query:
            view.set_search(args.query)
        view.set_tab(args.tab)

    notes = view.current_view_notes
    if args.json:
        from .api.app import note_to_dict

        print(json.dumps([note_to_dict(n) for n in notes], indent=2))
        return 0

    for note in notes:
        space = f"\t[{note.space}]" if note.space else ""
        print(f"{note.id}\t{note.title}\t{describe_content(note.content)}{space}")
    return 0


def cmd_serve(args: argparse.Namespace, rt: Any) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install inkwell[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

    # Determine token
    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    enable_cors = getattr(args, 'cors', False)
    app = create_app(rt, token=token, enable_cors=enable_cors)

    host = getattr(args, 'host', '127.0.0.1')
    port = getattr(args, 'port', 8765)

    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")

    return 0


def _version_text() -> str:
    return f"inkwell {__version__} (python {platform.python_version()}, platform {platform.system().lower()})"


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="inkwell", description="Inkwell CLI"
    )
    parser.add_argument(
        "--version", action="version", version=_version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/inkwell.toml)",
    )
    parser.add_argument(
        "--seed",
        type=Path,
        default=None,
        help="YAML file with notes and spaces to load at startup",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # segments command
    parser_segments = subparsers.add_parser("segments", help="Show parsed segments of a file")
    parser_segments.add_argument("file", help="Content file ('-' for stdin)")
    parser_segments.add_argument(
        "--preview", action="store_true", help="Truncate text like a note card"
    )

    # summary command
    parser_summary = subparsers.add_parser("summary", help="One-line content summary")
    parser_summary.add_argument("file", help="Content file ('-' for stdin)")

    # render command
    parser_render = subparsers.add_parser("render", help="Render a drawing to PNG")
    parser_render.add_argument("file", help="Content file ('-' for stdin)")
    parser_render.add_argument(
        "--index", type=int, default=0, help="Drawing number, from 0 (default: 0)"
    )
    parser_render.add_argument(
        "--thumbnail", action="store_true", help="Small preview instead of full export"
    )
    parser_render.add_argument("--out", help="Output path for --thumbnail")

    # ls command
    parser_ls = subparsers.add_parser("ls", help="List notes of a view")
    parser_ls.add_argument("--query", default="", help="Search query")
    parser_ls.add_argument(
        "--tab", choices=["flows", "spaces", "hmmm"], default="flows", help="View tab"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API")
    parser_serve.add_argument("--host", default="127.0.0.1", help="Bind host")
    parser_serve.add_argument("--port", type=int, default=8765, help="Bind port")
    parser_serve.add_argument(
        "--token", default="auto", help="Bearer token ('auto' to generate, 'none' to disable)"
    )
    parser_serve.add_argument("--cors", action="store_true", help="Enable CORS")

    args = parser.parse_args()

    # Configure logging before wiring the runtime
    config = load_config(config_path=args.config)
    level = logging.DEBUG if args.verbose else getattr(logging, config.logging.level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Build runtime
    rt = build_runtime(seed_path=args.seed, config=config)

    handlers = {
        "segments": cmd_segments,
        "summary": cmd_summary,
        "render": cmd_render,
        "ls": cmd_ls,
        "serve": cmd_serve,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
