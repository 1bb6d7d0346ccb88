"""
MPS format writer.

Sections are written in this order:

    NAME      model name
    ROWS      " N  COST" then one row per constraint (E, L, G or N)
    COLUMNS   column-major matrix; continuous variables first, then
              integer variables between INTORG / INTEND markers
    RHS       effective bound of each row, and -offset on COST
    RANGES    upper - lower for each range row (only when there is one)
    BOUNDS    FR, FX, BV, MI, LO, UP, PL entries
    ENDATA

A range row is written with sense L: its RHS is the upper bound and its
RANGES entry R = upper - lower, so readers recover [rhs - R, rhs].

MPS encodes minimization only. A maximizing model is rejected before any
text is produced; the caller negates the objective if that is what it wants.
"""

import logging
import math
from typing import List, Tuple

from mpexport.export.comments import comment_header
from mpexport.export.context import ExportContext, check_variable_bounds
from mpexport.export.layout import MpsLineWriter
from mpexport.export.names import make_exportable_name
from mpexport.export.result import ExportError, ExportStatus

logger = logging.getLogger(__name__)


OBJECTIVE_ROW = "COST"


def reserved_names(ctx: ExportContext) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """
    Labels the MPS writer uses itself.

    Returns:
        (reserved variable names, reserved constraint names)
    """
    return (), (OBJECTIVE_ROW,)


def _integer_marker(tag: str) -> str:
    # Name at column 5, 'MARKER' at column 15, tag at column 40
    return f"    {'MARKER':<8}  {repr('MARKER'):<8}{'':17}{repr(tag)}"


class MpsFormatWriter:
    """
    Writes one model as MPS text, fixed or free layout.

    The context must already hold resolved names and the fixed/free decision.
    write() either returns the complete document or raises ExportError before
    anything is returned.
    """

    def __init__(self, ctx: ExportContext):
        self._ctx = ctx
        self._model = ctx.model
        self._fixed = ctx.use_fixed_mps_format

    def _new_section(self) -> MpsLineWriter:
        return MpsLineWriter(self._fixed, self._ctx.options.fixed_mps_number_width)

    def write(self) -> str:
        if self._model.objective.maximize:
            raise ExportError(
                ExportStatus.MAXIMIZATION_NOT_SUPPORTED,
                "MPS cannot represent a maximization objective",
            )
        check_variable_bounds(self._model)
        transpose = self._transpose()

        format_name = "MPS (fixed)" if self._fixed else "MPS (free)"
        parts = [
            comment_header(self._ctx, "*", format_name),
            self._name_section(),
            "ROWS\n", self._rows_section(),
            "COLUMNS\n", self._columns_section(transpose),
            "RHS\n", self._rhs_section(),
        ]
        ranges = self._ranges_section()
        if ranges:
            parts.extend(["RANGES\n", ranges])
        parts.extend(["BOUNDS\n", self._bounds_section(), "ENDATA\n"])
        return "".join(parts)

    # =========================================================================
    # Sections
    # =========================================================================

    def _transpose(self) -> List[List[Tuple[int, float]]]:
        """Column-major view of the matrix: variable -> [(row, coefficient)]."""
        num_variables = self._model.num_variables

        for var_index in self._model.objective.coefficients:
            if not 0 <= var_index < num_variables:
                raise ExportError(
                    ExportStatus.INVALID_VARIABLE_INDEX,
                    f"Objective references out-of-bounds variable index {var_index}",
                )

        transpose: List[List[Tuple[int, float]]] = [[] for _ in range(num_variables)]
        for cst_index, ct in enumerate(self._model.constraints):
            for var_index, coefficient in ct.coefficients.items():
                if not 0 <= var_index < num_variables:
                    raise ExportError(
                        ExportStatus.INVALID_VARIABLE_INDEX,
                        f"Constraint {cst_index} references out-of-bounds "
                        f"variable index {var_index}",
                    )
                if coefficient != 0.0:
                    transpose[var_index].append((cst_index, coefficient))
        return transpose

    def _name_section(self) -> str:
        name = make_exportable_name(self._model.name) if self._model.name else ""
        return f"{'NAME':<14}{name}".rstrip() + "\n"

    def _rows_section(self) -> str:
        section = self._new_section()
        section.append_line("N", OBJECTIVE_ROW)
        for index, ct in enumerate(self._model.constraints):
            section.append_line(_row_sense(ct), self._ctx.constraint_names[index])
        return section.getvalue()

    def _columns_section(self, transpose: List[List[Tuple[int, float]]]) -> str:
        section = self._new_section()
        self._append_columns(section, False, transpose)
        if self._ctx.counts.integer or self._ctx.counts.binary:
            section.append_text_line(_integer_marker("INTORG"))
            self._append_columns(section, True, transpose)
            section.append_text_line(_integer_marker("INTEND"))
        logger.debug("COLUMNS section: %d lines", len(section.lines))
        return section.getvalue()

    def _append_columns(
        self,
        section: MpsLineWriter,
        integrality: bool,
        transpose: List[List[Tuple[int, float]]],
    ) -> None:
        objective = self._model.objective.coefficients
        for var_index, var in enumerate(self._model.variables):
            if var.is_integer != integrality:
                continue
            name = self._ctx.variable_names[var_index]
            cost = objective.get(var_index, 0.0)
            # A column with no entry at all still needs one line to exist
            if cost != 0.0 or not transpose[var_index]:
                section.append_term_with_context(name, OBJECTIVE_ROW, cost)
            for cst_index, coefficient in transpose[var_index]:
                section.append_term_with_context(
                    name, self._ctx.constraint_names[cst_index], coefficient
                )
            section.finish_line()

    def _rhs_section(self) -> str:
        section = self._new_section()
        offset = self._model.objective.offset
        if offset != 0.0:
            section.append_term_with_context("RHS", OBJECTIVE_ROW, -offset)
        for index, ct in enumerate(self._model.constraints):
            if ct.is_free:
                continue
            rhs = ct.upper_bound if _row_sense(ct) == "L" else ct.lower_bound
            section.append_term_with_context("RHS", self._ctx.constraint_names[index], rhs)
        return section.getvalue()

    def _ranges_section(self) -> str:
        section = self._new_section()
        for index, ct in enumerate(self._model.constraints):
            if ct.is_range:
                section.append_term_with_context(
                    "RANGE",
                    self._ctx.constraint_names[index],
                    ct.upper_bound - ct.lower_bound,
                )
        return section.getvalue()

    def _bounds_section(self) -> str:
        section = self._new_section()
        for index, var in enumerate(self._model.variables):
            name = self._ctx.variable_names[index]
            lower = var.lower_bound
            upper = var.upper_bound

            if var.is_free:
                section.append_bound("FR", name)
            elif var.is_fixed:
                section.append_bound("FX", name, lower)
            elif var.is_binary:
                section.append_bound("BV", name)
            else:
                if lower == -math.inf:
                    section.append_bound("MI", name)
                elif lower != 0.0 or upper < 0.0:
                    # Some readers drop the lower bound to -inf on a negative UP
                    section.append_bound("LO", name, lower)
                if upper != math.inf:
                    section.append_bound("UP", name, upper)
                elif var.is_integer:
                    # Some readers default integer columns to [0, 1]
                    section.append_bound("PL", name)
        return section.getvalue()


def _row_sense(ct) -> str:
    if ct.is_free:
        return "N"
    if ct.is_equality:
        return "E"
    if ct.is_range or ct.lower_bound == -math.inf:
        return "L"
    return "G"
