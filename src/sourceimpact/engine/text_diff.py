"""Character-level text diff reduced to change regions.

Pure function, no I/O.  The edit script comes from ``difflib`` over the
raw character sequences; ``replace`` opcodes are split into a delete run
followed by an insert run so every run advances exactly one offset.
"""

from __future__ import annotations

from difflib import SequenceMatcher

import structlog

from sourceimpact.engine.models import DiffRegion, DiffType

log = structlog.get_logger(__name__)


def compute_text_diff(old_text: str, new_text: str) -> list[DiffRegion]:
    """Compute change regions between two versions of a text.

    ``removed`` regions carry old-text offsets, ``added`` regions carry
    new-text offsets.  A removed run directly followed by an added run whose
    start offset equals the removed run's end offset is merged into one
    ``modified`` region.  The merge compares offsets from the two different
    texts and looks at nothing else.
    """
    if old_text == new_text:
        return []

    regions = _raw_regions(old_text, new_text)
    merged = _merge_replacements(regions)

    log.debug(
        "text_diff_computed",
        old_len=len(old_text),
        new_len=len(new_text),
        raw_regions=len(regions),
        regions=len(merged),
    )
    return merged


def _raw_regions(old_text: str, new_text: str) -> list[DiffRegion]:
    matcher = SequenceMatcher(None, old_text, new_text, autojunk=False)
    regions: list[DiffRegion] = []
    old_offset = 0
    new_offset = 0

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            old_offset += i2 - i1
            new_offset += j2 - j1
            continue

        if tag in ("delete", "replace"):
            removed = old_text[i1:i2]
            regions.append(
                DiffRegion(
                    kind=DiffType.REMOVED,
                    start_offset=old_offset,
                    end_offset=old_offset + len(removed),
                    text=removed,
                    replaced_text=removed,
                )
            )
            old_offset += len(removed)

        if tag in ("insert", "replace"):
            inserted = new_text[j1:j2]
            regions.append(
                DiffRegion(
                    kind=DiffType.ADDED,
                    start_offset=new_offset,
                    end_offset=new_offset + len(inserted),
                    text=inserted,
                    insert_at=old_offset,
                )
            )
            new_offset += len(inserted)

    return regions


def _merge_replacements(regions: list[DiffRegion]) -> list[DiffRegion]:
    merged: list[DiffRegion] = []
    i = 0
    while i < len(regions):
        curr = regions[i]
        nxt = regions[i + 1] if i + 1 < len(regions) else None
        if (
            curr.kind == DiffType.REMOVED
            and nxt is not None
            and nxt.kind == DiffType.ADDED
            and nxt.start_offset == curr.end_offset
        ):
            merged.append(
                DiffRegion(
                    kind=DiffType.MODIFIED,
                    start_offset=curr.start_offset,
                    end_offset=nxt.end_offset,
                    text=nxt.text,
                    replaced_text=curr.replaced_text,
                )
            )
            i += 2
        else:
            merged.append(curr)
            i += 1
    return merged
