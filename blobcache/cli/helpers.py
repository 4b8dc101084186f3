"""
Shared helpers for CLI commands — store access and error reporting.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import click

from ..backends.registry import create_backend
from ..config.loader import StoreConfig
from ..errors import BlobCacheError
from ..store import StoreFacade

EXIT_MISSING = 1
EXIT_ERROR = 2


@contextmanager
def backend_errors(ctx: click.Context) -> Iterator[None]:
    """Turn backend and config failures into an error line and exit code 2."""
    try:
        yield
    except BlobCacheError as e:
        click.secho(f"✗ {e.message}", fg="red", err=True)
        ctx.exit(EXIT_ERROR)


def open_store(ctx: click.Context) -> StoreFacade:
    """Build the facade for this invocation (loads the document once)."""
    if "store" not in ctx.obj:
        config: StoreConfig = ctx.obj["config"]
        backend = create_backend(config, root=ctx.obj["root"])
        ctx.obj["store"] = StoreFacade(backend)
    return ctx.obj["store"]
