"""
Per-call export state.

Every export call builds one ExportContext with setup() and threads it
through the name resolver, the format selector and the writers. Nothing
survives the call, so an LP export never sees names or format decisions made
for an earlier MPS export on the same model.
"""

from dataclasses import dataclass, field
from typing import List

from mpexport.config import FIXED_MPS_NAME_LENGTH, MAX_NAME_LENGTH, NAME_SUFFIX_MARGIN
from mpexport.core.model import Model
from mpexport.export.result import ExportError, ExportStatus, VariableCounts


@dataclass(frozen=True)
class ExportOptions:
    """
    Options controlling one export call.

    Attributes:
        obfuscate: Replace every name by "V<i>" / "C<i>" (1-based)
        fixed_format: Request the fixed MPS layout (MPS only)
        log_invalid_names: Log a warning for each rewritten or generated name
        show_unused_variables: Keep variables without nonzero coefficients
            in LP output
        max_line_length: LP lines are wrapped past this length
        max_name_length: Sanitized names longer than this are obfuscated
        fixed_mps_name_length: Longest name allowed in fixed MPS format
        fixed_mps_number_width: Numeric field width in fixed MPS format
    """
    obfuscate: bool = False
    fixed_format: bool = False
    log_invalid_names: bool = False
    show_unused_variables: bool = False
    max_line_length: int = 10000
    max_name_length: int = MAX_NAME_LENGTH - NAME_SUFFIX_MARGIN
    fixed_mps_name_length: int = FIXED_MPS_NAME_LENGTH
    fixed_mps_number_width: int = 12


@dataclass
class ExportContext:
    """
    Derived state for one export call.

    Attributes:
        model: The borrowed model (never modified)
        options: Options of this call
        counts: Continuous / integer / binary variable counts
        variable_names: Resolved variable names, index-aligned with model.variables
        constraint_names: Resolved constraint names, index-aligned with model.constraints
        max_name_length_seen: Longest resolved name (for the format selector)
        use_fixed_mps_format: Valid once the format selector has run
    """
    model: Model
    options: ExportOptions
    counts: VariableCounts
    variable_names: List[str] = field(default_factory=list)
    constraint_names: List[str] = field(default_factory=list)
    max_name_length_seen: int = 0
    use_fixed_mps_format: bool = False

    @property
    def use_obfuscated_names(self) -> bool:
        return self.options.obfuscate


def count_variables(model: Model) -> VariableCounts:
    """Classify the model's variables into continuous, integer and binary."""
    num_binary = 0
    num_integer = 0
    for var in model.variables:
        if var.is_binary:
            num_binary += 1
        elif var.is_integer:
            num_integer += 1
    return VariableCounts(
        continuous=model.num_variables - num_binary - num_integer,
        integer=num_integer,
        binary=num_binary,
    )


def setup(model: Model, options: ExportOptions) -> ExportContext:
    """
    Create the fresh state of one export call.

    Names are left empty; they are filled in by the name resolver.
    """
    return ExportContext(
        model=model,
        options=options,
        counts=count_variables(model),
    )


def check_variable_bounds(model: Model) -> None:
    """
    Raise ExportError unless every variable bound can be written as a number.

    A +inf lower bound, a -inf upper bound or a NaN bound has no LP or MPS
    spelling.
    """
    for index, var in enumerate(model.variables):
        if not var.has_writable_bounds:
            raise ExportError(
                ExportStatus.INVALID_VARIABLE_BOUNDS,
                f"Variable {index} has bounds [{var.lower_bound}, {var.upper_bound}] "
                f"that cannot be written",
            )
