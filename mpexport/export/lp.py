"""
LP format writer.

Writes the CPLEX-style LP format:

    \\ comment header
    Minimize
     obj: 2 x + y - 3 z
    Subject To
     c1: x + y >= 2
     r_lhs: x - z >= 2
     r_rhs: x - z <= 5
    Bounds
     0 <= z <= 10
    Binaries
     y
    Generals
     z
    End

A constraint with two distinct finite bounds is written as two rows,
"<name>_lhs" (>= lower) and "<name>_rhs" (<= upper), since ranged-row
syntax is not read the same way by every solver. Rows with no finite bound
have no LP syntax and are left out. Both caveats are stated in the header.
"""

import logging
import math
from typing import List, Optional, Tuple

from mpexport.export.comments import comment_header
from mpexport.export.context import ExportContext, check_variable_bounds
from mpexport.export.layout import format_number
from mpexport.export.names import FORBIDDEN_CHARS as BASE_FORBIDDEN_CHARS, UniqueNamer
from mpexport.export.result import ExportError, ExportStatus

logger = logging.getLogger(__name__)


OBJECTIVE_LABEL = "obj"
CONSTANT_NAME = "Constant"

# "[", "]" and "^" write quadratic terms
FORBIDDEN_CHARS = BASE_FORBIDDEN_CHARS | frozenset("[]^")

# Section and bound words, matched case-insensitively by readers
KEYWORDS = frozenset([
    "minimize", "minimum", "min", "maximize", "maximum", "max",
    "subject", "such", "st", "s.t.",
    "bounds", "bound", "free", "inf", "infinity",
    "binaries", "binary", "bin", "generals", "general", "gen",
    "integers", "integer", "semi-continuous", "semis", "semi",
    "sos", "end",
])


def reserved_names(ctx: ExportContext) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """
    Labels the LP writer uses itself.

    Returns:
        (reserved variable names, reserved constraint names)
    """
    variables = (CONSTANT_NAME,) if ctx.model.objective.offset != 0.0 else ()
    return variables, (OBJECTIVE_LABEL,)


def write_lp_term(
    ctx: ExportContext,
    var_index: int,
    coefficient: float,
    first: bool = False,
) -> Optional[str]:
    """
    Format one "coefficient name" term.

    A coefficient of 1 is written as the bare name, and negative
    coefficients as "- 3 x" rather than "+ -3 x". The first term of an
    expression carries no leading "+".

    Returns:
        The term ("" for a zero coefficient), or None if var_index is out of
        range.
    """
    if not 0 <= var_index < len(ctx.variable_names):
        logger.error("Reference to out-of-bounds variable index # %d", var_index)
        return None
    if coefficient == 0.0:
        return ""
    return _format_term(ctx.variable_names[var_index], coefficient, first)


def _format_term(name: str, coefficient: float, first: bool) -> str:
    magnitude = abs(coefficient)
    body = name if magnitude == 1.0 else f"{format_number(magnitude)} {name}"
    if coefficient < 0:
        return f"- {body}"
    return body if first else f"+ {body}"


def _format_bound(name: str, lower: float, upper: float) -> str:
    if lower == upper:
        return f"{name} = {format_number(lower)}"
    if lower == -math.inf and upper == math.inf:
        return f"{name} free"
    if upper == math.inf:
        return f"{format_number(lower)} <= {name}"
    lower_text = "-inf" if lower == -math.inf else format_number(lower)
    return f"{lower_text} <= {name} <= {format_number(upper)}"


class _LineBreaker:
    """Joins terms, starting a continuation line past max_line_length."""

    def __init__(self, max_line_length: int, used: int = 0):
        self._max = max_line_length
        self._size = used
        self._parts: List[str] = []

    @property
    def is_empty(self) -> bool:
        return not self._parts

    def append(self, text: str) -> None:
        if self._parts:
            text = " " + text
        self._size += len(text)
        if self._size > self._max and self._parts:
            text = text.lstrip()
            self._size = len(text) + 1
            self._parts.append("\n ")
        self._parts.append(text)

    def getvalue(self) -> str:
        return "".join(self._parts)


class LpFormatWriter:
    """
    Writes one model as LP text.

    The context must already hold resolved names. write() either returns the
    complete document or raises ExportError before anything is returned.

    Example:
        >>> ctx = setup(model, ExportOptions())
        >>> ... resolve names into ctx ...
        >>> text = LpFormatWriter(ctx).write()
    """

    def __init__(self, ctx: ExportContext):
        self._ctx = ctx
        self._model = ctx.model
        self._options = ctx.options
        self._show_variable = [
            self._options.show_unused_variables
        ] * self._model.num_variables

    def write(self) -> str:
        check_variable_bounds(self._model)
        objective = self._objective_section()
        constraints, num_rows, num_free = self._constraints_section()
        bounds = self._bounds_section()
        integers = self._integer_sections()

        notes = []
        num_ranges = sum(1 for ct in self._model.constraints if ct.is_range)
        if num_ranges:
            notes.append(
                f"{num_ranges} range constraint(s) written as two rows "
                f"(_lhs for >=, _rhs for <=)."
            )
        if num_free:
            notes.append(f"{num_free} constraint(s) without finite bounds not shown.")
        num_hidden = self._show_variable.count(False)
        if num_hidden:
            notes.append(f"{num_hidden} unused variable(s) not shown.")

        header = comment_header(
            self._ctx, "\\", "LP", notes,
            extra_counts=[("LP rows", num_rows)],
        )
        logger.debug(
            "LP export: %d rows, %d shown variables",
            num_rows, self._show_variable.count(True),
        )
        return "".join([header, objective, constraints, bounds, integers, "End\n"])

    # =========================================================================
    # Sections
    # =========================================================================

    def _term(self, var_index: int, coefficient: float, first: bool) -> str:
        term = write_lp_term(self._ctx, var_index, coefficient, first)
        if term is None:
            raise ExportError(
                ExportStatus.INVALID_VARIABLE_INDEX,
                f"Reference to out-of-bounds variable index {var_index}",
            )
        if term:
            self._show_variable[var_index] = True
        return term

    def _expression(self, coefficients: dict, used: int) -> str:
        breaker = _LineBreaker(self._options.max_line_length, used)
        for var_index, coefficient in coefficients.items():
            term = self._term(var_index, coefficient, first=breaker.is_empty)
            if term:
                breaker.append(term)
        return breaker.getvalue()

    def _objective_section(self) -> str:
        objective = self._model.objective
        label = f" {OBJECTIVE_LABEL}: "
        expression = self._expression(objective.coefficients, len(label))
        if objective.offset != 0.0:
            constant = _format_term(CONSTANT_NAME, objective.offset, not expression)
            expression = f"{expression} {constant}" if expression else constant
        sense = "Maximize" if objective.maximize else "Minimize"
        return f"{sense}\n{label}{expression}".rstrip() + "\n"

    def _constraints_section(self) -> Tuple[str, int, int]:
        # Row labels of split ranges must not clash with any other label
        namer = UniqueNamer(self._ctx.constraint_names, KEYWORDS)
        namer.make_unique(OBJECTIVE_LABEL)

        lines = ["Subject To"]
        num_free = 0
        for index, ct in enumerate(self._model.constraints):
            if ct.is_free:
                self._check_indices(ct.coefficients)
                num_free += 1
                continue
            name = self._ctx.constraint_names[index]
            # Account for the label, a possible suffix and the separators
            expression = self._expression(ct.coefficients, len(name) + 10)
            if not expression:
                expression = self._empty_expression()

            if ct.is_equality:
                rows = [(name, "=", ct.upper_bound)]
            elif ct.is_range:
                rows = [
                    (namer.make_unique(f"{name}_lhs"), ">=", ct.lower_bound),
                    (namer.make_unique(f"{name}_rhs"), "<=", ct.upper_bound),
                ]
            elif ct.lower_bound != -math.inf:
                rows = [(name, ">=", ct.lower_bound)]
            else:
                rows = [(name, "<=", ct.upper_bound)]

            for label, op, rhs in rows:
                lines.append(f" {label}: {expression} {op} {format_number(rhs)}")

        return "\n".join(lines) + "\n", len(lines) - 1, num_free

    def _check_indices(self, coefficients: dict) -> None:
        for var_index in coefficients:
            if write_lp_term(self._ctx, var_index, 0.0) is None:
                raise ExportError(
                    ExportStatus.INVALID_VARIABLE_INDEX,
                    f"Reference to out-of-bounds variable index {var_index}",
                )

    def _empty_expression(self) -> str:
        # A row needs at least one term; "0 x" keeps its bound check
        if not self._ctx.variable_names:
            return f"0 {CONSTANT_NAME}"
        self._show_variable[0] = True
        return f"0 {self._ctx.variable_names[0]}"

    def _bounds_section(self) -> str:
        lines = ["Bounds"]
        if self._model.objective.offset != 0.0:
            lines.append(f" {CONSTANT_NAME} = 1")
        for index, var in enumerate(self._model.variables):
            if not self._show_variable[index] or var.has_default_bounds:
                continue
            lines.append(
                " " + _format_bound(
                    self._ctx.variable_names[index],
                    var.lower_bound,
                    var.upper_bound,
                )
            )
        if len(lines) == 1:
            return ""
        return "\n".join(lines) + "\n"

    def _integer_sections(self) -> str:
        binaries = []
        generals = []
        for index, var in enumerate(self._model.variables):
            if not self._show_variable[index] or not var.is_integer:
                continue
            name = self._ctx.variable_names[index]
            if var.is_binary:
                binaries.append(f" {name}")
            else:
                generals.append(f" {name}")

        text = ""
        if binaries:
            text += "Binaries\n" + "\n".join(binaries) + "\n"
        if generals:
            text += "Generals\n" + "\n".join(generals) + "\n"
        return text
