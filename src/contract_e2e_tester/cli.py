"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from contract_e2e_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from contract_e2e_tester.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_contract_suite_run,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_PACKAGE_LOGGER = "contract_e2e_tester"
_QUIET_LOGGERS = ("httpx", "httpcore", "urllib3")
_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}


class CliError(Exception):
    """Custom CLI error."""


def configure_logging(verbosity: int) -> logging.Logger:
    """Route package logs to stderr at WARNING, `-v` INFO or `-vv` DEBUG."""
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(_LOG_LEVELS[min(verbosity, 2)])
    handlers = [handler for handler in logger.handlers if getattr(handler, "_cli_handler", False)]
    if handlers:
        handlers[0].setStream(sys.stderr)  # type: ignore[attr-defined]
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._cli_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbosity >= 2 else logging.WARNING)
    return logger


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="contract-e2e-tester")
def cli() -> None:
    """Secret Network contract integration tester."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML suite configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML suite configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML suite configuration file",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Optional directory for storing result workbooks",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Skip all chain interactions and write a skipped-results workbook.",
)
@click.option(
    "-v",
    "--verbose",
    "verbosity",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
def run_suite(config_path: str, output_dir: str | None, dry_run: bool, verbosity: int) -> None:
    """Deploy the contracts and run the NFT scenario suite against a devnet."""
    configure_logging(verbosity)
    try:
        outcome = execute_contract_suite_run(
            RunRequest(config_path=config_path, output_dir=output_dir, dry_run=dry_run)
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.output_path))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
