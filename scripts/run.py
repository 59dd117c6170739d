"""Developer shortcuts: ``python scripts/run.py {install,test,narrate,serve}``."""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
SAMPLE_SNAPSHOT = "examples/sample_home/input.json"
SAMPLE_OUTPUT = "examples/output/sample_home.json"


def _python(*args: str) -> int:
    cmd = [sys.executable, *args]
    print("+", " ".join(cmd))
    return subprocess.call(cmd, cwd=ROOT_DIR)


def _forwarded(extra: list[str]) -> list[str]:
    return extra[1:] if extra[:1] == ["--"] else extra


def cmd_install(args: argparse.Namespace) -> int:
    return _python("-m", "pip", "install", "-e", ".[test]")


def cmd_test(args: argparse.Namespace) -> int:
    return _python("-m", "pytest", *_forwarded(args.extra))


def cmd_narrate(args: argparse.Namespace) -> int:
    extra = _forwarded(args.extra) or [SAMPLE_SNAPSHOT, "--out", SAMPLE_OUTPUT]
    return _python("-m", "home_focus.cli.main", *extra)


def cmd_serve(args: argparse.Namespace) -> int:
    return _python("-m", "uvicorn", "app.main:app", "--host", args.host, "--port", str(args.port), "--reload")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Home Focus developer tasks.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("install", help="pip install -e .[test]").set_defaults(func=cmd_install)

    for name, func, help_text in (
        ("test", cmd_test, "Run pytest; extra args are forwarded."),
        ("narrate", cmd_narrate, "Run hf-narrate (defaults to the sample snapshot)."),
    ):
        task = sub.add_parser(name, help=help_text)
        task.add_argument("extra", nargs=argparse.REMAINDER)
        task.set_defaults(func=func)

    serve = sub.add_parser("serve", help="Run the FastAPI service with uvicorn.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=56470)
    serve.set_defaults(func=cmd_serve)
    return parser


def main() -> int:
    args = build_parser().parse_args()
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
