"""Source excerpts pointing at a query error."""

UNAVAILABLE = "unavailable"


def get_code_frame(
    source: str,
    line: int | None,
    column: int | None,
    *,
    context_lines: int = 2,
) -> str:
    """Render the lines around line/column with a marker and caret.

    Example for line=2, column=3:

          1 | query {
        > 2 |   title
            |   ^
          3 | }

    Args:
        source: Full query text
        line: 1-indexed line of the error
        column: 1-indexed column of the error (clamped to the line)
        context_lines: Lines shown before and after the error line

    Returns:
        The rendered frame, or "unavailable" if the location does not
        point inside the source.
    """
    if type(line) is not int or type(column) is not int:
        return UNAVAILABLE
    lines = source.split("\n")
    if line < 1 or line > len(lines):
        return UNAVAILABLE

    first = max(1, line - context_lines)
    last = min(len(lines), line + context_lines)
    width = len(str(last))
    target = lines[line - 1]
    caret_column = min(max(column, 1), len(target) + 1)

    rendered: list[str] = []
    for number in range(first, last + 1):
        text = lines[number - 1]
        marker = ">" if number == line else " "
        rendered.append(f"{marker} {number:>{width}} | {text}".rstrip())
        if number == line:
            rendered.append(f"  {' ' * width} | {' ' * (caret_column - 1)}^")
    return "\n".join(rendered)
