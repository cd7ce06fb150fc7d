"""Fixed-width text tables."""

from collections.abc import Sequence


def render_table(
    headers: Sequence[str], rows: Sequence[Sequence[str]]
) -> list[str]:
    """Align headers and rows into columns.

    Each column is as wide as its widest cell (header included).  Cells
    are left-justified and separated by a single space.  Nothing is
    truncated, so one wide cell widens the whole column.
    """
    ncols = len(headers)
    table = [list(headers)]
    for row in rows:
        cells = list(row)
        if len(cells) < ncols:
            cells.extend([""] * (ncols - len(cells)))
        table.append(cells)
    widths = [
        max(len(r[col]) for r in table) for col in range(len(table[0]))
    ]
    lines: list[str] = []
    for cells in table:
        padded = [
            cell.ljust(widths[col]) if col < len(widths) else cell
            for col, cell in enumerate(cells)
        ]
        lines.append(" ".join(padded).rstrip())
    return lines


def print_table(
    headers: Sequence[str], rows: Sequence[Sequence[str]]
) -> None:
    for line in render_table(headers, rows):
        print(line)
