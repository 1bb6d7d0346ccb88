"""
Export result module.

This module defines the data structures returned by the exporter. Writers
signal failure internally with ExportError; the ModelExporter facade turns
it into an ExportResult whose text is None, so callers never see partial
output.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional


class ExportStatus(Enum):
    """Outcome of an export call."""
    OK = auto()                          # Complete document produced
    MAXIMIZATION_NOT_SUPPORTED = auto()  # MPS can only encode minimization
    INVALID_VARIABLE_INDEX = auto()      # A coefficient references a missing variable
    INVALID_VARIABLE_BOUNDS = auto()     # A bound has no finite value to write


class ExportError(Exception):
    """
    Raised by the format writers to abort an export.

    Attributes:
        status: The failure status reported to the caller
    """

    def __init__(self, status: ExportStatus, message: str):
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class VariableCounts:
    """
    Classification of the model's variables.

    `integer` counts integer variables that are not binary.
    """
    continuous: int = 0
    integer: int = 0
    binary: int = 0

    @property
    def total(self) -> int:
        return self.continuous + self.integer + self.binary


@dataclass
class ExportResult:
    """
    Result of one export call.

    Attributes:
        status: OK or the failure reason
        text: The complete document (None unless status is OK)
        message: Human-readable failure description
        format_name: "LP", "MPS (fixed)" or "MPS (free)"
        use_fixed_mps_format: Whether the fixed MPS layout was used
        variable_names: Resolved variable names, index-aligned with the model
        constraint_names: Resolved constraint names, index-aligned with the model
        counts: Variable classification computed during setup

    Example:
        >>> result = exporter.export_as_mps_format(fixed_format=True)
        >>> if result.is_ok:
        ...     print(result.text)
        ... else:
        ...     print(result.status.name, result.message)
    """
    status: ExportStatus = ExportStatus.OK
    text: Optional[str] = None
    message: str = ""
    format_name: str = ""
    use_fixed_mps_format: bool = False
    variable_names: List[str] = field(default_factory=list)
    constraint_names: List[str] = field(default_factory=list)
    counts: VariableCounts = field(default_factory=VariableCounts)

    @property
    def is_ok(self) -> bool:
        return self.status == ExportStatus.OK and self.text is not None

    @classmethod
    def failure(cls, error: ExportError, format_name: str) -> 'ExportResult':
        """Build a failed result carrying no text."""
        return cls(
            status=error.status,
            text=None,
            message=str(error),
            format_name=format_name,
        )

    def summary(self) -> str:
        """Return a one-line summary."""
        if not self.is_ok:
            return f"{self.format_name} export failed: {self.status.name} ({self.message})"
        return (
            f"{self.format_name} export: {len(self.text)} characters, "
            f"{len(self.variable_names)} variables, "
            f"{len(self.constraint_names)} constraints"
        )

    def __str__(self) -> str:
        return self.summary()
