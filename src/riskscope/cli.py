"""CLI entry point using Typer."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from riskscope import __version__
from riskscope.config import ScanConfig, load_config
from riskscope.errors import MalformedFindingError
from riskscope.models import Finding, ScanResult, ScanSummary

app = typer.Typer(
    name="riskscope",
    help="Score, enrich and prioritise security findings on one 0-100 scale.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"riskscope {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """riskscope: unified risk scoring for security findings."""


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command()
def score(
    findings_path: Annotated[Path, typer.Argument(help="JSON file of normalised findings")],
    enrich: Annotated[
        bool, typer.Option("--enrich", "-e", help="Enrich vulnerabilities from NVD/EPSS/KEV")
    ] = False,
    format: Annotated[
        str | None, typer.Option("--format", "-f", help="terminal, json or markdown")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output file path")
    ] = None,
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Config file path")
    ] = None,
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Logging level")
    ] = None,
    now: Annotated[
        datetime | None, typer.Option("--now", help="Evaluate SLAs as of this time")
    ] = None,
) -> None:
    """Score a set of findings and report application risk."""
    cfg = load_config(config)
    cfg.enrich = enrich or cfg.enrich
    cfg.format = format or cfg.format
    cfg.output = output or cfg.output
    cfg.log_level = log_level or cfg.log_level
    _setup_logging(cfg.log_level)

    if now is not None and now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    from riskscope.ingest import load_findings

    try:
        findings = load_findings(findings_path)
    except (MalformedFindingError, OSError) as exc:
        err_console.print(f"[red]Cannot load findings: {exc}[/red]")
        raise typer.Exit(2)

    if cfg.enrich:
        findings = asyncio.run(_enrich(findings, cfg))

    result = build_result(findings, cfg, now)
    _output_report(result, cfg)


async def _enrich(findings: list[Finding], cfg: ScanConfig) -> list[Finding]:
    from rich.progress import Progress

    from riskscope.intel import build_enricher

    async with httpx.AsyncClient(headers={"User-Agent": f"riskscope/{__version__}"}) as client:
        enricher = build_enricher(client, cfg.enrichment)
        with Progress(console=err_console, transient=True) as progress:
            task = progress.add_task("Enriching vulnerabilities", total=None)

            def on_progress(current: int, total: int) -> None:
                progress.update(task, completed=current, total=total)

            return await enricher.enrich_vulnerabilities(findings, on_progress)


def build_result(
    findings: list[Finding],
    cfg: ScanConfig,
    now: datetime | None = None,
) -> ScanResult:
    """Score, aggregate and SLA-annotate ``findings``."""
    from riskscope.analysis.aggregate import aggregate, bayesian_aggregate
    from riskscope.analysis.sla import apply_sla, summarize_sla
    from riskscope.scoring import score_findings

    now = now or datetime.now(UTC)
    score_findings(findings, cfg.context, now=now)
    findings = apply_sla(findings, cfg.context, now)

    return ScanResult(
        timestamp=now,
        application=cfg.context.name if cfg.context else "",
        findings=findings,
        summary=ScanSummary.from_findings(findings),
        risk=aggregate(findings),
        bayesian_risk=bayesian_aggregate(findings),
        sla=summarize_sla(findings),
    )


def _output_report(result: ScanResult, cfg: ScanConfig) -> None:
    if cfg.format == "json":
        from riskscope.reporters.json_report import render_json

        text = render_json(result)
    elif cfg.format == "markdown":
        from riskscope.reporters.markdown import render_markdown

        text = render_markdown(result)
    else:
        from riskscope.reporters.terminal import render_terminal

        render_terminal(result, console)
        return

    if cfg.output:
        Path(cfg.output).write_text(text)
        console.print(f"\n[green]Report saved to {cfg.output}[/green]")
    else:
        console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command(name="config")
def config_show(
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Config file path")
    ] = None,
) -> None:
    """Show current configuration."""
    cfg = load_config(config)
    data = cfg.model_dump()
    if data["enrichment"]["nvd_api_key"]:
        data["enrichment"]["nvd_api_key"] = "***"
    console.print_json(json.dumps(data, default=str))
