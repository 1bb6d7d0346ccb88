"""
Number formatting and MPS line layout.

MpsLineWriter packs (name, value) pairs at most two per data line, the limit
of the MPS grammar, for every section that carries pairs (COLUMNS, RHS,
RANGES). `current_column` counts the pairs already written on the current
line:

    0 -> write "head_name" then the pair, column becomes 1
    1 -> append the pair to the same line, column becomes 2
    2 -> break the line, then behave as 0

Fixed layout:  " %-2s %-8s"  header,  "  %-8s  %12s "  pair
Free layout:   " %-2s  %-8s" header,  "  %-16s  %21s " pair
"""

import math
from typing import List, Optional


def format_number(value: float) -> str:
    """
    Shortest decimal text that reads back as the same double.

    Integral values are written without a fractional part.

    Example:
        >>> format_number(3.0), format_number(0.1), format_number(1e20)
        ('3', '0.1', '1e+20')
    """
    value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def format_fixed_number(value: float, width: int = 12) -> str:
    """
    Format a value for a fixed MPS numeric field.

    Uses the largest "%G" precision whose output fits in `width` characters.
    """
    precision = width
    text = f"{value:.{precision}G}"
    while len(text) > width and precision > 1:
        precision -= 1
        text = f"{value:.{precision}G}"
    return text


class MpsLineWriter:
    """
    Accumulates the lines of one MPS section.

    Attributes:
        fixed_format: Use the fixed-column field widths
        number_width: Numeric field width in fixed format
        current_column: Pairs written on the current line (0, 1 or 2)

    Example:
        >>> writer = MpsLineWriter(fixed_format=False)
        >>> for row, value in [("c1", 1.0), ("c2", 2.0), ("c3", 3.0)]:
        ...     writer.append_term_with_context("x", row, value)
        >>> writer.finish_line()
        >>> len(writer.lines)
        2
    """

    def __init__(self, fixed_format: bool, number_width: int = 12):
        self.fixed_format = fixed_format
        self.number_width = number_width
        self.current_column = 0
        self._lines: List[str] = []
        self._line = ""

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def lines(self) -> List[str]:
        """Completed lines, trailing whitespace stripped."""
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines and not self._line

    # =========================================================================
    # Field writers
    # =========================================================================

    def append_line_header(self, tag: str, name: str) -> None:
        """Append the head of a line: a type tag and a name."""
        if self.fixed_format:
            self._line += f" {tag:<2} {name:<8}"
        else:
            self._line += f" {tag:<2}  {name:<8}"

    def append_pair(self, name: str, value: float) -> None:
        """Append one (name, value) pair."""
        if self.fixed_format:
            number = format_fixed_number(value, self.number_width)
            self._line += f"  {name:<8}  {number:>{self.number_width}} "
        else:
            self._line += f"  {name:<16}  {format_number(value):>21} "

    def end_line(self) -> None:
        """Terminate the current line and reset the column counter."""
        self._lines.append(self._line.rstrip())
        self._line = ""
        self.current_column = 0

    def finish_line(self) -> None:
        """Terminate the current line if anything is pending on it."""
        if self._line:
            self.end_line()
        self.current_column = 0

    # =========================================================================
    # Line writers
    # =========================================================================

    def append_line(self, tag: str, name: str) -> None:
        """Write a complete header-only line, e.g. a ROWS entry."""
        self.finish_line()
        self.append_line_header(tag, name)
        self.end_line()

    def append_text_line(self, text: str) -> None:
        """Write a preformatted line, e.g. an integrality marker."""
        self.finish_line()
        self._lines.append(text.rstrip())

    def append_term_with_context(self, head_name: str, name: str, value: float) -> None:
        """
        Append a (name, value) pair under `head_name`.

        Starts a new line, headed by `head_name`, when the current one is
        empty or already holds two pairs.
        """
        if self.current_column == 2:
            self.end_line()
        if self.current_column == 0:
            self.append_line_header("", head_name)
        self.append_pair(name, value)
        self.current_column += 1

    def append_bound(self, bound_type: str, name: str, value: Optional[float] = None) -> None:
        """
        Write one BOUNDS line.

        Bound types without a value (FR, MI, PL, BV) pass value=None.
        """
        self.finish_line()
        self.append_line_header(bound_type, "BOUND")
        if value is None:
            self._line += f"  {name}"
        else:
            self.append_pair(name, value)
        self.end_line()

    def reset(self) -> None:
        """Drop everything written so far."""
        self._lines = []
        self._line = ""
        self.current_column = 0

    def getvalue(self) -> str:
        """Return the section text, one newline after each line."""
        self.finish_line()
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"
