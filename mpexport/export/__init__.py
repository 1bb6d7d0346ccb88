"""
Export module - LP and MPS writers.

This module provides:
- ModelExporter: Facade exporting a borrowed Model as LP or MPS text
- ExportResult / ExportStatus: Outcome of one export call
- ExportOptions: Per-call options (obfuscation, fixed format, line length)
- resolve_names / can_use_fixed_mps_format: Name rules and format selection
- LpFormatWriter / MpsFormatWriter: The format writers
- MpsLineWriter: Two-pairs-per-line packing of MPS data lines

Usage:
------
    >>> from mpexport.export import ModelExporter
    >>> result = ModelExporter(model).export_as_lp_format()
    >>> print(result.text)
"""

from mpexport.export.context import ExportContext, ExportOptions, count_variables, setup
from mpexport.export.exporter import (
    ModelExporter,
    export_model_as_lp_format,
    export_model_as_mps_format,
)
from mpexport.export.layout import MpsLineWriter, format_fixed_number, format_number
from mpexport.export.lp import LpFormatWriter, write_lp_term
from mpexport.export.mps import MpsFormatWriter
from mpexport.export.names import (
    ResolvedNames,
    UniqueNamer,
    can_use_fixed_mps_format,
    make_exportable_name,
    resolve_names,
)
from mpexport.export.result import ExportError, ExportResult, ExportStatus, VariableCounts


__all__ = [
    # Facade
    'ModelExporter',
    'export_model_as_lp_format',
    'export_model_as_mps_format',

    # Results
    'ExportResult',
    'ExportStatus',
    'ExportError',
    'VariableCounts',

    # Per-call state
    'ExportOptions',
    'ExportContext',
    'setup',
    'count_variables',

    # Names and format selection
    'ResolvedNames',
    'UniqueNamer',
    'make_exportable_name',
    'resolve_names',
    'can_use_fixed_mps_format',

    # Writers
    'LpFormatWriter',
    'MpsFormatWriter',
    'MpsLineWriter',
    'write_lp_term',
    'format_number',
    'format_fixed_number',
]
