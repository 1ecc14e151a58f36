"""sci analyze command - run the impact engine on a job file."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from sourceimpact.cli.job import JobError, load_job
from sourceimpact.config import load_config
from sourceimpact.core.errors import SourceImpactError
from sourceimpact.engine import analyze_source_change, determine_severity
from sourceimpact.engine.models import ImpactAnalysis, Severity

_SEVERITY_STYLES = {
    Severity.MINOR: "green",
    Severity.MODERATE: "yellow",
    Severity.MAJOR: "red",
}


@click.command()
@click.argument("job_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--artifacts",
    "affected_artifacts",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Number of generated artifacts citing the changed chunks.",
)
@click.option(
    "--total-evidence",
    type=click.IntRange(min=0),
    default=None,
    help="Total evidence chunks of the source (enables the churn-ratio rule).",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def analyze_command(
    ctx: click.Context,
    job_file: Path,
    affected_artifacts: int,
    total_evidence: int | None,
    as_json: bool,
) -> None:
    """Align chunks of an updated source and classify the change.

    JOB_FILE is a YAML or JSON file with old_text, new_text, old_chunks
    and new_chunks.
    """
    config = (ctx.obj or {}).get("config") or load_config()
    try:
        job = load_job(job_file)
        result = analyze_source_change(
            job.old_text,
            job.new_text,
            job.ordered_chunks("old"),
            job.ordered_chunks("new"),
            similarity=job.similarity_index(),
            config=config,
            source_id=job.source_id or job_file.stem,
        )
    except JobError as e:
        raise click.ClickException(str(e)) from e
    except SourceImpactError as e:
        raise click.ClickException(str(e)) from e

    severity = determine_severity(affected_artifacts, result.mappings, total_evidence)

    if as_json:
        click.echo(json.dumps(_to_payload(result, severity), indent=2))
        return

    _print_report(result, severity)


def _to_payload(result: ImpactAnalysis, severity: Severity) -> dict[str, object]:
    return {
        "status": result.status.value,
        "severity": severity.value,
        "changed_chunk_ids": result.changed_chunk_ids,
        "regions": len(result.regions),
        "mappings": [m.to_dict() for m in result.mappings],
    }


def _print_report(result: ImpactAnalysis, severity: Severity) -> None:
    console = Console()
    style = _SEVERITY_STYLES[severity]
    console.print(f"Status: {result.status.value}")
    console.print(f"Severity: [{style}]{severity.value}[/{style}]")

    if not result.mappings:
        console.print("[dim]No chunk changes[/dim]")
        return

    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("type", style="cyan")
    table.add_column("old chunk")
    table.add_column("new chunk")
    table.add_column("similarity", justify="right")
    for m in result.mappings:
        table.add_row(
            m.diff_type.value,
            m.old_chunk_id or "-",
            m.new_chunk_id or "-",
            f"{m.similarity_score:.3f}" if m.similarity_score is not None else "-",
        )
    console.print(table)
