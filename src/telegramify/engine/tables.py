from __future__ import annotations

from typing import Sequence

TABLE_COLUMN_SEPARATOR = " | "
TABLE_HEADER_JOINT = "-+-"


def format_table(rows: Sequence[Sequence[str]]) -> str:
    """Render rows of cell text as a fixed-width, left-justified grid.

    A dashed separator follows the first row only when there is more than one
    row. Short rows are padded with empty cells.
    """
    if not rows:
        return ""
    column_count = max(len(row) for row in rows)
    widths = [0] * column_count
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))

    lines: list[str] = []
    for row_index, row in enumerate(rows):
        cells = [
            (row[index] if index < len(row) else "").ljust(widths[index])
            for index in range(column_count)
        ]
        lines.append(TABLE_COLUMN_SEPARATOR.join(cells))
        if row_index == 0 and len(rows) > 1:
            lines.append(TABLE_HEADER_JOINT.join("-" * width for width in widths))
    return "\n".join(lines)
