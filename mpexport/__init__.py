"""
mpexport: LP and MPS export for linear / mixed-integer models

Serializes an in-memory model (variables, constraints, objective) into the
CPLEX LP format or the MPS format (fixed or free layout), taking care of
name legality, range rows, integer markers and bound encoding.
"""

__version__ = "0.1.0"

# Configuration
from mpexport.config import ExportConfig, config, setup_logging

# Core classes - these are the main user-facing API
from mpexport.core.model import (
    INFINITY,
    Constraint,
    Model,
    ModelBuilder,
    Objective,
    ObjectiveSense,
    Variable,
)

# Exporter
from mpexport.export import (
    ExportError,
    ExportOptions,
    ExportResult,
    ExportStatus,
    ModelExporter,
    VariableCounts,
    export_model_as_lp_format,
    export_model_as_mps_format,
)

# Adapters
from mpexport.io import HIGHS_AVAILABLE, model_from_highs

__all__ = [
    # Version
    "__version__",
    # Configuration
    "config",
    "ExportConfig",
    "setup_logging",
    # Core classes
    "INFINITY",
    "Variable",
    "Constraint",
    "Objective",
    "ObjectiveSense",
    "Model",
    "ModelBuilder",
    # Exporter
    "ModelExporter",
    "ExportOptions",
    "ExportResult",
    "ExportStatus",
    "ExportError",
    "VariableCounts",
    "export_model_as_lp_format",
    "export_model_as_mps_format",
    # Adapters
    "model_from_highs",
    "HIGHS_AVAILABLE",
]
