"""Typer CLI for check-certificates."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .backends import BackendError
from .config import CONFIG_ENV_VAR, ConfigurationError, load_config
from .exporters import build_table, ensure_writable, render_table, write_metrics
from .log import setup_logging
from .models import ReportOptions
from .probe import RetryPolicy
from .report import format_results, render_names
from .scanner import check_domains, utc_now
from .sources import check_single_source, resolve_hostnames

app = typer.Typer(
    name="check-certificates",
    help="SSL Certificate checker - Report HTTPS certificates that are expired, erroneous or expiring soon",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def fail(message: str, code: int = 1) -> typer.Exit:
    """Report a fatal error on stderr and build the exit exception."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]check-certificates[/bold] v{__version__}")
        raise typer.Exit()


@app.command()
def check_command(
    backend_name: Annotated[
        Optional[str],
        typer.Option("--backend-name", "-b", help="Domain list backend name (pastebin)"),
    ] = None,
    input_filename: Annotated[
        Optional[Path],
        typer.Option("--input-filename", "-i", help="Path to the list of domains to check"),
    ] = None,
    domain: Annotated[
        Optional[str],
        typer.Option("--domain", "-d", help="Domain name to check"),
    ] = None,
    sensor_mode: Annotated[
        bool,
        typer.Option("--sensor-mode", "-s", help="Exit with non-zero if there was something to print out"),
    ] = False,
    only_alerting: Annotated[
        bool,
        typer.Option("--only-alerting", "-l", help="Show only alerting domains (expiring soon and erroneous)"),
    ] = False,
    only_names: Annotated[
        bool,
        typer.Option("--only-names", "-n", help="Show only domain names instead of the full table"),
    ] = False,
    alert_limit: Annotated[
        int,
        typer.Option("--alert-limit", "-A", min=0, help="Set threshold of upcoming expiration alert to n days"),
    ] = 7,
    generate_metrics: Annotated[
        bool,
        typer.Option("--generate-metrics", "-G", help="Write a Prometheus metrics file to PROMETHEUS_EXPORT_FILENAME"),
    ] = False,
    retries: Annotated[
        int,
        typer.Option("--retries", "-R", min=1, help="Probe attempts per domain, with backoff between failures"),
    ] = 1,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", min=0.1, help="Connect and handshake timeout in seconds [default: 10]"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=1, max=64, help="Domains probed concurrently [default: 1]"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", envvar=CONFIG_ENV_VAR, help="Path to YAML configuration file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = False,
) -> None:
    """Check HTTPS certificate expiration for one or more domains."""
    logger = setup_logging(verbose, console=err_console)

    try:
        settings = load_config(config_path)
        options = ReportOptions(
            alert_limit_days=alert_limit,
            only_alerting=only_alerting,
            only_names=only_names,
        )

        check_single_source(input_filename, domain, backend_name)

        # Fail before any network work if the metrics file can't be written.
        metrics_path = None
        if generate_metrics:
            if not settings.prometheus_export_filename:
                raise ConfigurationError("PROMETHEUS_EXPORT_FILENAME is not set")
            metrics_path = ensure_writable(settings.prometheus_export_filename, logger)
        else:
            logger.info("Prometheus metrics generation not requested")

        hostnames = resolve_hostnames(
            input_filename=input_filename,
            domain=domain,
            backend_name=backend_name,
            settings=settings,
            logger=logger,
        )
    except (ConfigurationError, BackendError) as e:
        raise fail(str(e))

    now = utc_now()
    try:
        results = check_domains(
            hostnames,
            now=now,
            timeout=timeout if timeout is not None else settings.timeout,
            retry=RetryPolicy(attempts=retries),
            workers=workers if workers is not None else settings.workers,
            logger=logger,
        )
    except KeyboardInterrupt:
        raise fail("Interrupted", 130)

    if metrics_path is not None:
        try:
            write_metrics(metrics_path, results, now, logger)
        except OSError as e:
            raise fail(f"Can't write Prometheus metrics file '{metrics_path}': {e}")

    rows = format_results(results, now, options, logger)
    if rows:
        if options.only_names:
            typer.echo(render_names(rows))
        elif console.is_terminal:
            console.print(build_table(rows))
        else:
            typer.echo(render_table(rows))

    if sensor_mode and rows:
        raise typer.Exit(1)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
