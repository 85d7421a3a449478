import json
import logging
import os
from typing import Any

import click

from vault_lookup.core import StoreError

DEBUG_ENV = "VAULT_LOOKUP_DEBUG"


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging (overrides log_level if True)
        log_level: Log level string ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    """
    if not debug:
        debug = os.environ.get(DEBUG_ENV, "").lower() in ("1", "true", "yes")

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(stream_handler)

    # hvac's transport is chatty at debug level
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def output_result(result: Any, json_output: bool = False) -> None:
    """Output a result in either JSON or human-readable format.

    Args:
        result: The result to output
        json_output: Whether to wrap the result in a JSON status envelope
    """
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": result}, indent=2, default=str))
    elif isinstance(result, str):
        click.echo(result)
    else:
        click.echo(json.dumps(result, indent=2, default=str))


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Report a failed lookup and abort the command.

    With ``debug`` the error type and, for store errors, the failing path
    are included.
    """
    error_info: dict[str, Any] = {"error": str(error)}
    if debug:
        error_info["type"] = error.__class__.__name__
        if isinstance(error, StoreError):
            error_info["path"] = error.path

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2))
    else:
        click.echo(f"Error: {error_info['error']}", err=True)
        for name in ("type", "path"):
            if name in error_info:
                click.echo(f"  {name}: {error_info[name]}", err=True)

    raise click.Abort()
