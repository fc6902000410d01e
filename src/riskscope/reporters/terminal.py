"""Rich terminal reporter."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from riskscope.models import ScanResult, Severity, SLAStatus, VulnerabilityFinding

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}

SLA_COLORS = {
    SLAStatus.OVERDUE: "bold red",
    SLAStatus.DUE_SOON: "yellow",
    SLAStatus.ON_TRACK: "green",
}


def render_terminal(result: ScanResult, console: Console) -> None:
    """Render scan results to terminal using Rich."""
    console.print()

    s = result.summary
    r = result.risk
    summary_text = (
        f"[bold]Risk: {r.overall:.1f}[/] (legacy {r.legacy_overall:.1f}, "
        f"bayesian {result.bayesian_risk:.1f})\n"
        f"[bold red]Critical: {s.critical}[/]  "
        f"[red]High: {s.high}[/]  "
        f"[yellow]Medium: {s.medium}[/]  "
        f"[cyan]Low: {s.low}[/]  "
        f"| Total: {s.total}  | KEV: {s.known_exploited}\n"
        f"SLA: [bold red]{result.sla.overdue} overdue[/]  "
        f"[yellow]{result.sla.due_soon} due soon[/]  "
        f"[green]{result.sla.on_track} on track[/]  "
        f"({result.sla.compliance_rate}% compliant)"
    )
    console.print(Panel(
        summary_text,
        title=f"[bold]Risk Summary: {result.application or 'application'}[/]",
        subtitle=f"{result.timestamp:%Y-%m-%d %H:%M UTC}",
    ))

    if not result.findings:
        console.print("\n[green]No findings.[/green]")
        return

    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("Score", width=6, justify="right")
    table.add_column("Sev", width=8)
    table.add_column("Category", width=16)
    table.add_column("ID", width=20)
    table.add_column("Title", ratio=3)
    table.add_column("Location", ratio=2)
    table.add_column("SLA", width=18)

    for f in result.sorted_findings():
        bucket = Severity.from_score(f.effective_score)
        color = SEVERITY_COLORS[bucket]
        kev_badge = ""
        epss_text = ""
        if isinstance(f, VulnerabilityFinding):
            kev_badge = " [bold red]KEV[/]" if f.known_exploited else ""
            epss_text = f" (EPSS:{f.epss:.0%})" if f.epss is not None else ""

        sla_text = ""
        if f.sla is not None:
            sla_text = f"[{SLA_COLORS[f.sla.status]}]{f.sla.deadline:%Y-%m-%d}[/]"

        table.add_row(
            f"[{color}]{f.effective_score:.0f}[/]",
            f"[{color}]{bucket.value.upper()}[/]{kev_badge}",
            f.category,
            f.id,
            f.title[:80] + epss_text,
            f.location[:40],
            sla_text,
        )

    console.print(table)
