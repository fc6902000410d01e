"""Markdown report generator."""

from __future__ import annotations

from riskscope.models import Category, ScanResult, Severity, VulnerabilityFinding


def render_markdown(result: ScanResult) -> str:
    """Render scan results as Markdown."""
    lines: list[str] = []
    s = result.summary
    r = result.risk

    lines.append("# Risk Report")
    lines.append("")
    if result.application:
        lines.append(f"- **Application**: {result.application}")
    lines.append(f"- **Date**: {result.timestamp:%Y-%m-%d %H:%M UTC}")
    lines.append(f"- **Overall risk**: {r.overall:.1f} / 100 (legacy {r.legacy_overall:.1f} / 10)")
    lines.append(f"- **Bayesian risk**: {result.bayesian_risk:.1f}")
    lines.append("")
    lines.append("## Summary")
    lines.append("")
    lines.append("| Critical | High | Medium | Low | Total | KEV |")
    lines.append("|----------|------|--------|-----|-------|-----|")
    lines.append(
        f"| {s.critical} | {s.high} | {s.medium} | {s.low} | {s.total} | {s.known_exploited} |"
    )
    lines.append("")
    lines.append(
        f"SLA: {result.sla.overdue} overdue, {result.sla.due_soon} due soon, "
        f"{result.sla.on_track} on track ({result.sla.compliance_rate}% compliant)"
    )
    lines.append("")

    if not result.findings:
        lines.append("No findings.")
        return "\n".join(lines)

    lines.append("## By category")
    lines.append("")
    lines.append("| Category | Count | Avg | Max |")
    lines.append("|----------|------:|----:|----:|")
    for category in Category:
        stats = r.breakdown.by_category[category]
        if stats.count:
            lines.append(
                f"| {category.value} | {stats.count} | {stats.avg_score:.1f} | {stats.max_score:.1f} |"
            )
    lines.append("")

    lines.append("## Findings")
    lines.append("")
    lines.append("| Score | Severity | Category | ID | Title | Location | SLA |")
    lines.append("|------:|----------|----------|-----|-------|----------|-----|")

    for f in result.sorted_findings():
        bucket = Severity.from_score(f.effective_score)
        kev = ""
        epss = ""
        if isinstance(f, VulnerabilityFinding):
            kev = " **KEV**" if f.known_exploited else ""
            epss = f" (EPSS:{f.epss:.0%})" if f.epss is not None else ""
        sla = f"{f.sla.status.value} {f.sla.deadline:%Y-%m-%d}" if f.sla else ""
        lines.append(
            f"| {f.effective_score:.0f} | {bucket.value.upper()}{kev} | {f.category} | "
            f"{f.id} | {f.title[:60]}{epss} | {f.location[:30]} | {sla} |"
        )

    lines.append("")
    return "\n".join(lines)
