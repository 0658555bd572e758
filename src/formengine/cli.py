"""
Command-line entrypoint for formengine.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .config import load_config
from .errors import CompileFailure
from .executor import compile_source
from .loader import GroupSource, load_component_groups
from .observability.logging_utils import configure_logging
from .preview import render_preview
from .scope.mois import MoisScopeBuilder
from .transformer import transform_source
from .ui.renderer import json_safe
from .version import __version__

GROUP_ENTRY_FILE = "index.jsx"
GROUP_SUFFIXES = (".jsx", ".tsx", ".js")


def build_cli_parser() -> argparse.ArgumentParser:
    cli = argparse.ArgumentParser(prog="formengine", description="Live form source renderer")
    cli.add_argument(
        "--version",
        action="version",
        version=f"formengine {__version__} (Python {sys.version.split()[0]})",
    )
    cli.add_argument("--log-level", default=None, help="Logging level (defaults to FORMENGINE_LOG_LEVEL)")
    sub = cli.add_subparsers(dest="command", required=True)

    transform_cmd = sub.add_parser("transform", help="Classify a source file and show the rewritten body")
    transform_cmd.add_argument("file", type=Path)

    render_cmd = sub.add_parser("render", help="Render a source file to HTML")
    render_cmd.add_argument("file", type=Path)
    render_cmd.add_argument("--json", action="store_true", help="Print the render tree and initial data as JSON")

    groups_cmd = sub.add_parser("groups", help="Load a directory of component groups")
    groups_cmd.add_argument("directory", type=Path)
    groups_cmd.add_argument("--passes", type=int, default=None, help="Total loader passes (default from config)")
    groups_cmd.add_argument("--no-cross-references", action="store_true", help="Run the first pass only")

    serve_cmd = sub.add_parser("serve", help="Start the FastAPI preview server")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)
    serve_cmd.add_argument("--dry-run", action="store_true", help="Build app but do not start server")
    return cli


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SystemExit(f"Cannot read {path}: {exc}") from exc


def discover_groups(directory: Path) -> List[GroupSource]:
    """Groups are `<dir>/<Name>/index.jsx` folders or `<dir>/<Name>.jsx` files."""
    if not directory.is_dir():
        raise SystemExit(f"{directory} is not a directory")
    sources: List[GroupSource] = []
    for entry in sorted(directory.iterdir()):
        if entry.is_dir() and (entry / GROUP_ENTRY_FILE).is_file():
            sources.append(GroupSource(name=entry.name, code=_read(entry / GROUP_ENTRY_FILE)))
        elif entry.is_file() and entry.suffix in GROUP_SUFFIXES:
            sources.append(GroupSource(name=entry.stem, code=_read(entry)))
    return sources


def main(argv: list[str] | None = None) -> None:
    cli = build_cli_parser()
    args = cli.parse_args(argv)
    config = load_config()
    configure_logging(args.log_level or config.log_level)

    if args.command == "transform":
        code = _read(args.file)
        result = transform_source(code)
        payload = {
            "shape": result.shape.value,
            "wrapper": result.wrapper.value,
            "uses_stateful_bindings": result.uses_stateful_bindings,
            "references_form": result.references_form,
            "body": result.body,
        }
        try:
            payload["references"] = list(compile_source(code).references)
        except CompileFailure as exc:
            payload["error"] = str(exc)
        print(json.dumps(payload, indent=2))
        return

    if args.command == "render":
        result = render_preview(_read(args.file), config=config)
        if args.json:
            print(
                json.dumps(
                    {
                        "shape": result.shape,
                        "error": result.error,
                        "initial_data": json_safe(result.initial_data),
                        "tree": result.tree(),
                    },
                    indent=2,
                )
            )
        else:
            print(result.html)
        if result.error:
            raise SystemExit(1)
        return

    if args.command == "groups":
        sources = discover_groups(args.directory)
        result = load_component_groups(
            sources,
            MoisScopeBuilder(),
            enable_cross_references=False if args.no_cross_references else None,
            passes=args.passes,
            config=config,
        )
        print(
            json.dumps(
                {
                    "groups": {name: sorted(exports) for name, exports in result.groups.items()},
                    "registry": sorted(result.components),
                    "errors": [{"group": error.group, "message": error.message} for error in result.errors],
                },
                indent=2,
            )
        )
        if result.errors:
            raise SystemExit(1)
        return

    if args.command == "serve":
        from .server import create_app

        app = create_app(config)
        if args.dry_run:
            print(json.dumps({"status": "ready", "host": args.host, "port": args.port}, indent=2))
            return
        import uvicorn

        uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())
        return


if __name__ == "__main__":  # pragma: no cover
    main()
