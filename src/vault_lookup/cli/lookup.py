import json
from pathlib import Path
from typing import Any

import click

from vault_lookup.cli.utils import configure_logging, output_error, output_result
from vault_lookup.core import NOT_FOUND, SimpleLookupContext, VaultLookupBackend, load_options
from vault_lookup.core.options import DEFAULT_FIELD_BEHAVIOR_VALUES, DEFAULT_FIELD_PARSE_VALUES


def parse_mounts(mount: tuple[str, ...]) -> dict[str, list[str]] | None:
    """Parse ``--mount NAME=PREFIX[,PREFIX...]`` values into a mounts mapping."""
    if not mount:
        return None

    mounts: dict[str, list[str]] = {}
    for item in mount:
        if "=" not in item:
            raise click.BadParameter(
                f"Mount must be in format name=prefix[,prefix...]: {item}", param_hint="--mount"
            )
        name, prefixes = item.split("=", 1)
        mounts.setdefault(name, []).extend(p for p in prefixes.split(",") if p)
    return mounts


@click.command(name="lookup")
@click.argument("key")
@click.option(
    "--options",
    "options_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML options file",
)
@click.option("--address", help="Vault server address")
@click.option("--token", help="Vault token, or path to a file holding it")
@click.option("--mount", multiple=True, help="Mount and prefixes in format name=prefix[,prefix...]")
@click.option("--default-field", help="Field to extract from the secret")
@click.option("--default-field-parse", type=click.Choice(DEFAULT_FIELD_PARSE_VALUES))
@click.option("--default-field-behavior", type=click.Choice(DEFAULT_FIELD_BEHAVIOR_VALUES))
@click.option(
    "--continue-if-not-found",
    is_flag=True,
    default=None,
    help="Try the next path after a store error",
)
@click.option("--explain", is_flag=True, help="Print lookup diagnostics to stderr")
@click.option(
    "--interpolate",
    is_flag=True,
    help="Expand ${VAR} references in paths and values from the environment",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def lookup(
    key: str,
    options_file: Path | None,
    address: str | None,
    token: str | None,
    mount: tuple[str, ...],
    default_field: str | None,
    default_field_parse: str | None,
    default_field_behavior: str | None,
    continue_if_not_found: bool | None,
    explain: bool,
    interpolate: bool,
    json_output: bool,
    debug: bool,
) -> None:
    """Look up a single key in Vault.

    \b
    Options are read from a YAML file and can be overridden on the command line.

    \b
    Examples:
        vault-lookup lookup db_password --options vault-lookup.yaml
        vault-lookup lookup db_password --mount secret=common,apps --default-field value
        vault-lookup lookup api_keys --default-field value --default-field-parse json --json-output
    """
    configure_logging(debug=debug)

    try:
        overrides: dict[str, Any] = {
            "address": address,
            "token": token,
            "mounts": parse_mounts(mount),
            "default_field": default_field,
            "default_field_parse": default_field_parse,
            "default_field_behavior": default_field_behavior,
            "continue_if_not_found": continue_if_not_found,
        }
        options = load_options(options_file, overrides)

        sink = (lambda text: click.echo(text, err=True)) if explain else None
        context = SimpleLookupContext(sink=sink, expand_variables=interpolate)
        result = VaultLookupBackend().lookup_key(key, options, context)
    except click.ClickException:
        raise
    except KeyboardInterrupt:
        if not json_output:
            click.echo("\nOperation cancelled by user", err=True)
        raise click.Abort() from None
    except Exception as e:
        output_error(e, json_output, debug)
        return

    if result is NOT_FOUND:
        if json_output:
            click.echo(json.dumps({"status": "not_found", "key": key}, indent=2))
        else:
            click.echo(f"Key '{key}' not found", err=True)
        raise click.exceptions.Exit(1)

    output_result(result, json_output)
