"""sci diff command - show change regions between two text files."""

import json
from pathlib import Path

import click

from sourceimpact.engine import compute_text_diff

_PREVIEW_CHARS = 60


@click.command()
@click.argument("old_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def diff_command(old_file: Path, new_file: Path, as_json: bool) -> None:
    """Print added/removed/modified regions between OLD_FILE and NEW_FILE."""
    regions = compute_text_diff(
        old_file.read_text(encoding="utf-8"),
        new_file.read_text(encoding="utf-8"),
    )

    if as_json:
        payload = [
            {
                "kind": r.kind.value,
                "start_offset": r.start_offset,
                "end_offset": r.end_offset,
                "text": r.text,
                "replaced_text": r.replaced_text,
                "insert_at": r.insert_at,
            }
            for r in regions
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    if not regions:
        click.echo("No changes")
        return

    for r in regions:
        preview = r.text if len(r.text) <= _PREVIEW_CHARS else r.text[:_PREVIEW_CHARS] + "..."
        click.echo(f"{r.kind.value:<8} [{r.start_offset}:{r.end_offset}] {preview!r}")
