"""
Comment header shared by the LP and MPS writers.
"""

from typing import List, Sequence

from mpexport.export.context import ExportContext
from mpexport.export.names import make_exportable_name


def comment_header(
    ctx: ExportContext,
    separator: str,
    format_name: str,
    notes: Sequence[str] = (),
    extra_counts: Sequence[tuple] = (),
) -> str:
    """
    Build the metadata comment block placed at the top of a document.

    Args:
        ctx: The export context (setup() must have run)
        separator: Comment marker, "\\" for LP and "*" for MPS
        format_name: Shown in the "Format" line
        notes: Free-text caveats appended after the counts
        extra_counts: (label, value) pairs listed under "Constraints"

    Returns:
        The comment lines, newline-terminated
    """
    model = ctx.model
    counts = ctx.counts
    name = make_exportable_name(model.name) if model.name else "NoName"
    lines: List[str] = [
        f"{separator} Generated by mpexport",
        f"{separator}   {'Name':<16} : {name}",
        f"{separator}   {'Format':<16} : {format_name}",
        f"{separator}   {'Constraints':<16} : {model.num_constraints}",
    ]
    for label, value in extra_counts:
        lines.append(f"{separator}     {label:<14} : {value}")
    lines.extend([
        f"{separator}   {'Variables':<16} : {model.num_variables}",
        f"{separator}     {'Binary':<14} : {counts.binary}",
        f"{separator}     {'Integer':<14} : {counts.integer}",
        f"{separator}     {'Continuous':<14} : {counts.continuous}",
    ])
    if ctx.use_obfuscated_names:
        lines.append(f"{separator} Variable and constraint names are obfuscated.")
    for note in notes:
        lines.append(f"{separator} {note}")
    return "\n".join(lines) + "\n"
