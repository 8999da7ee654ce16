# src/chainverify/cli.py
"""chainverify Command Line Interface.

Entry point for the chainverify CLI tool.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from chainverify import __version__
from chainverify.contracts import BrokenChainError, ChainVerificationError, VerificationReport
from chainverify.core.config import ChainVerifySettings, load_settings

if TYPE_CHECKING:
    from chainverify.core.chain import ChainVerifier
    from chainverify.core.store import ChainDB

__all__ = [
    "app",
    "load_settings",  # Re-exported from config for convenience
]

app = typer.Typer(
    name="chainverify",
    help="chainverify: Verify tamper-evident hash chains stored in database tables.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"chainverify version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # We handle existence check ourselves for better error message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging (one event per record).",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """chainverify: Verify tamper-evident hash chains stored in database tables."""
    from chainverify.core.logging import configure_logging

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(json_output=json_logs, level=log_level)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _load_settings_or_exit(settings: str, table: str | None) -> ChainVerifySettings:
    """Load and validate settings, turning every failure into exit code 1."""
    try:
        config = load_settings(Path(settings))
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {settings}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    if table is not None:
        config = config.model_copy(update={"table": table})
    return config


def _build_verifier(config: ChainVerifySettings, db: ChainDB) -> ChainVerifier:
    from chainverify.core.canonical import chain_hash
    from chainverify.core.chain import ChainVerifier
    from chainverify.core.store import SqlRecordStore, SqlSchemaProvider, StaticChainHead

    store_options: dict[str, Any] = {
        "schema": config.database.db_schema,
        "key_column": config.layout.key_column,
    }
    head = StaticChainHead(
        head_key=config.head.head_key_bytes,
        terminator=config.head.terminator_bytes,
        trusted_hash=config.head.trusted_hash,
        blockchain_id_column=config.head.blockchain_id_column,
    )
    return ChainVerifier(
        SqlRecordStore(db, **store_options),
        SqlSchemaProvider(db, **store_options),
        head,
        chain_hash,
        layout=config.layout.to_layout(),
        linkage=config.verifier.linkage,
        reject_duplicates=config.verifier.reject_duplicates,
    )


def _render_key(key: bytes, encoding: str) -> str:
    if encoding == "hex":
        return key.hex()
    return key.decode("utf-8", errors="backslashreplace")


def _report_to_dict(report: VerificationReport, encoding: str) -> dict[str, Any]:
    return {
        "table": report.table,
        "verified": report.verified,
        "records_verified": report.records_verified,
        "final_hash": report.final_hash,
        "trusted_hash": report.trusted_hash,
        "gaps": [_render_key(key, encoding) for key in report.gaps],
        "order": [_render_key(key, encoding) for key in report.order],
    }


def _echo_error(message: str, output_format: str, **details: Any) -> None:
    if output_format == "json":
        typer.echo(json.dumps({"error": message, **details}))
    else:
        typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
        for name, value in details.items():
            typer.echo(f"  {name}: {value}", err=True)


@app.command()
def verify(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    table: str | None = typer.Option(
        None,
        "--table",
        "-t",
        help="Table to verify (overrides the settings file).",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable) or 'json' (machine-readable).",
    ),
) -> None:
    """Verify that a table holds an unbroken hash chain ending on the trusted hash.

    Exits 0 when the chain verifies, 1 otherwise.

    Examples:

        chainverify verify --settings chain.yaml

        chainverify verify -s chain.yaml --table ledger --format json
    """
    from chainverify.core.store import ChainDB

    config = _load_settings_or_exit(settings, table)
    encoding = config.head.key_encoding

    try:
        with ChainDB(config.database.url, echo=config.database.echo) as db:
            report = _build_verifier(config, db).run(config.table)
    except BrokenChainError as e:
        _echo_error(
            "hash chain broken",
            output_format,
            key=_render_key(e.key, encoding),
            expected=e.expected,
            actual=e.actual,
        )
        raise typer.Exit(1) from None
    except ChainVerificationError as e:
        _echo_error(str(e), output_format)
        raise typer.Exit(1) from None
    except SQLAlchemyError as e:
        _echo_error(f"database error on {config.database.sanitized_url}: {e}", output_format)
        raise typer.Exit(1) from None

    if output_format == "json":
        typer.echo(json.dumps(_report_to_dict(report, encoding)))
    else:
        typer.echo(f"Table: {report.table} ({config.database.sanitized_url})")
        typer.echo(f"  Records verified: {report.records_verified}")
        if report.gaps:
            typer.echo(f"  Gaps skipped: {', '.join(_render_key(k, encoding) for k in report.gaps)}")
        typer.echo(f"  Final hash:   {report.final_hash}")
        typer.echo(f"  Trusted hash: {report.trusted_hash}")
        if report.verified:
            typer.secho("Chain verified.", fg=typer.colors.GREEN)
        else:
            typer.secho("Chain does not end on the trusted hash.", fg=typer.colors.RED, err=True)

    if not report.verified:
        raise typer.Exit(1)


@app.command()
def order(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    table: str | None = typer.Option(
        None,
        "--table",
        "-t",
        help="Table to walk (overrides the settings file).",
    ),
) -> None:
    """Print the reconstructed chain order, oldest record first, without checking hashes."""
    from chainverify.core.store import ChainDB

    config = _load_settings_or_exit(settings, table)

    try:
        with ChainDB(config.database.url, echo=config.database.echo) as db:
            keys = _build_verifier(config, db).order(config.table)
    except ChainVerificationError as e:
        _echo_error(str(e), "console")
        raise typer.Exit(1) from None
    except SQLAlchemyError as e:
        _echo_error(f"database error on {config.database.sanitized_url}: {e}", "console")
        raise typer.Exit(1) from None

    for position, key in enumerate(keys, start=1):
        typer.echo(f"{position}\t{_render_key(key, config.head.key_encoding)}")
