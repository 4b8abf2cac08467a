"""CLI for richnote - annotated markdown notes."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .adapters.yaml_codec import NoteFile
from .core.index import OffsetIndex
from .core.model import Alignment
from .core.scanner import scan
from .core.session import (
    DocumentState,
    Transition,
    apply_image,
    apply_markup,
    apply_remove,
    apply_style,
    on_selection_change,
)
from .format.views import (
    attributes_from,
    block_view,
    bounds_view,
    node_view,
    selection_view,
    style_view,
)
from .runtime import Runtime, build_runtime


def _read_note(path: str, rt: Runtime) -> NoteFile:
    return rt.codec.decode(Path(path).read_text(encoding="utf-8"))


def _select(args: argparse.Namespace, rt: Runtime) -> tuple[NoteFile, DocumentState]:
    note = _read_note(args.file, rt)
    state = rt.open_state(note)
    stop = args.stop if args.stop is not None else args.start
    state = on_selection_change(state, args.start, stop).state
    return note, state


def _emit_edit(
    args: argparse.Namespace, rt: Runtime, note: NoteFile, transition: Transition
) -> int:
    state = transition.state
    if args.json:
        print(json.dumps({
            "text": state.text,
            "selection": selection_view(state.selection),
            "article_style": style_view(state.article_style),
        }, indent=2, ensure_ascii=False))
        return 0
    out = NoteFile(body=state.text, article_style=state.article_style, meta=note.meta)
    sys.stdout.write(rt.codec.encode(out))
    return 0


def cmd_scan(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the annotation decomposition of a note body."""
    note = _read_note(args.file, rt)
    print(json.dumps([node_view(n) for n in scan(note.body)], indent=2, ensure_ascii=False))
    return 0


def cmd_index(args: argparse.Namespace, rt: Runtime) -> int:
    """Print every annotation with its offsets."""
    note = _read_note(args.file, rt)
    index = OffsetIndex.build(note.body)
    output = [
        {"bounds": bounds_view(bounds), "annotation": node_view(node)}
        for bounds, node in index.items()
    ]
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


def cmd_blocks(args: argparse.Namespace, rt: Runtime) -> int:
    """Print the rendering-ready block tree."""
    note = _read_note(args.file, rt)
    blocks = rt.render_blocks(note.body)
    print(json.dumps([block_view(b) for b in blocks], indent=2, ensure_ascii=False))
    return 0


def cmd_check(args: argparse.Namespace, rt: Runtime) -> int:
    """Report which edits the selection allows."""
    _note, state = _select(args, rt)
    current = None
    if state.current is not None:
        bounds, node = state.current
        current = {"bounds": bounds_view(bounds), "annotation": node_view(node)}
    print(json.dumps({
        "selection": selection_view(state.selection),
        "current": current,
        "plain_markdown": state.can_plain_markdown_style,
        "custom_style": state.can_custom_style,
    }, indent=2, ensure_ascii=False))
    return 0


def cmd_style(args: argparse.Namespace, rt: Runtime) -> int:
    """Style the selection, the selected annotation or the whole article."""
    attrs = attributes_from(args.font, args.size, args.color, args.background)
    if not attrs:
        print("Error: give at least one of --font, --size, --color, --background", file=sys.stderr)
        return 1
    note, state = _select(args, rt)
    if not state.selection.collapsed and not state.can_custom_style:
        print("Error: selection straddles an annotation or spans a ']' or line break", file=sys.stderr)
        return 1
    return _emit_edit(args, rt, note, apply_style(state, attrs))


def cmd_image(args: argparse.Namespace, rt: Runtime) -> int:
    """Insert an image annotation."""
    note, state = _select(args, rt)
    transition = apply_image(state, args.src, Alignment(args.align), args.description)
    if transition.state is state:
        print("Error: selection cuts through an annotation", file=sys.stderr)
        return 1
    return _emit_edit(args, rt, note, transition)


def cmd_unstyle(args: argparse.Namespace, rt: Runtime) -> int:
    """Strip the annotation whose clause holds a position."""
    args.start, args.stop = args.at, args.at
    note, state = _select(args, rt)
    if state.current is None:
        print(f"No annotation clause at {args.at}", file=sys.stderr)
        return 1
    return _emit_edit(args, rt, note, apply_remove(state))


def cmd_markup(args: argparse.Namespace, rt: Runtime) -> int:
    """Apply bold, italic or heading markdown to the selection."""
    note, state = _select(args, rt)
    if not state.can_plain_markdown_style:
        print("Error: selection is empty or straddles an annotation", file=sys.stderr)
        return 1
    return _emit_edit(args, rt, note, apply_markup(state, args.kind, args.level))


def cmd_serve(args: argparse.Namespace, rt: Runtime) -> int:
    """Start local JSON API server."""
    try:
        import uvicorn

        from .api.app import create_app, generate_token
    except ImportError as e:
        print(
            "Error: API dependencies not installed. "
            "Install with: pip install richnote[api]",
            file=sys.stderr
        )
        print(f"Details: {e}", file=sys.stderr)
        return 1

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

    app = create_app(rt, token=token, enable_cors=args.cors)

    host = args.host or rt.config.api.host
    port = args.port or rt.config.api.port
    print(f"Starting server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


def _add_selection_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", help="Note file (Markdown with optional YAML frontmatter)")
    p.add_argument("--start", type=int, required=True, help="Selection start offset in the body")
    p.add_argument("--stop", type=int, default=None, help="Selection stop offset (default: --start)")


def version_text() -> str:
    return (
        f"richnote {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="richnote", description="Annotated markdown note tools"
    )
    parser.add_argument(
        "--version", action="version", version=version_text()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: cwd/richnote.toml)",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print edit results as JSON"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    for name, help_text in (
        ("scan", "Print annotation nodes of a note"),
        ("index", "Print annotation offsets of a note"),
        ("blocks", "Print the spliced block tree of a note"),
    ):
        subparsers.add_parser(name, help=help_text).add_argument("file", help="Note file")

    parser_check = subparsers.add_parser("check", help="Show which edits a selection allows")
    _add_selection_args(parser_check)

    parser_style = subparsers.add_parser("style", help="Apply style attributes")
    _add_selection_args(parser_style)
    parser_style.add_argument("--font", help="Font name")
    parser_style.add_argument("--size", type=int, help="Font size")
    parser_style.add_argument("--color", help="Named text color")
    parser_style.add_argument("--background", help="Named background color")

    parser_image = subparsers.add_parser("image", help="Insert an image annotation")
    _add_selection_args(parser_image)
    parser_image.add_argument("--src", required=True, help="Image URL")
    parser_image.add_argument(
        "--align", choices=[a.value for a in Alignment], default="left",
        help="Alignment (default: left)"
    )
    parser_image.add_argument(
        "--description", default=None,
        help="Description (default: the selected text)"
    )

    parser_unstyle = subparsers.add_parser("unstyle", help="Remove an annotation")
    parser_unstyle.add_argument("file", help="Note file")
    parser_unstyle.add_argument("--at", type=int, required=True, help="Offset inside the clause")

    parser_markup = subparsers.add_parser("markup", help="Apply markdown emphasis or heading")
    _add_selection_args(parser_markup)
    parser_markup.add_argument(
        "--kind", choices=["bold", "italic", "heading"], required=True
    )
    parser_markup.add_argument(
        "--level", type=int, default=1, help="Heading level (default: 1)"
    )

    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument("--host", default=None, help="Host to bind to (default: config)")
    parser_serve.add_argument("--port", type=int, default=None, help="Port (default: config)")
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers: dict[str, Any] = {
        "scan": cmd_scan,
        "index": cmd_index,
        "blocks": cmd_blocks,
        "check": cmd_check,
        "style": cmd_style,
        "image": cmd_image,
        "unstyle": cmd_unstyle,
        "markup": cmd_markup,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)

    if handler:
        try:
            rt = build_runtime(config_path=args.config)
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
