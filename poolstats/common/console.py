"""ANSI colour codes and progress helpers for the console."""

from __future__ import annotations

import sys


class C:
    """ANSI colour codes (no-op if not a tty)."""

    _tty = sys.stdout.isatty()
    RED = "\033[0;31m" if _tty else ""
    GREEN = "\033[0;32m" if _tty else ""
    CYAN = "\033[0;36m" if _tty else ""
    YELLOW = "\033[1;33m" if _tty else ""
    BOLD = "\033[1m" if _tty else ""
    NC = "\033[0m" if _tty else ""


def info(msg: str) -> None:
    print(f"{C.CYAN}[INFO]{C.NC}  {msg}")


def ok(msg: str) -> None:
    print(f"{C.GREEN}[ OK ]{C.NC} {msg}")


def warn(msg: str) -> None:
    print(f"{C.YELLOW}[WARN]{C.NC} {msg}", file=sys.stderr)


def fail(msg: str, code: int = 1) -> None:
    """Report a fatal error and terminate the run."""
    print(f"{C.RED}[FAIL]{C.NC} {msg}", file=sys.stderr)
    sys.exit(code)


def banner(title: str, width: int = 62) -> None:
    print(f"{C.BOLD}{'=' * width}{C.NC}")
    print(f"{C.BOLD}  {title}{C.NC}")
    print(f"{C.BOLD}{'=' * width}{C.NC}")
