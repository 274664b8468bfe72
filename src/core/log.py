"""Setup de logging.

La librería solo usa `logging.getLogger(__name__)`; los handlers los instala
el entry-point (CLI) llamando a `setup_logging`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", *, console: Console | None = None) -> logging.Logger:
    """Configura el root logger con un `RichHandler` (sin duplicar handlers)."""

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in root.handlers[:]:
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx loguea cada request en INFO; lo dejamos en WARNING salvo DEBUG.
    if root.level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
    return root
