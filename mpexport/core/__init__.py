"""
Core module - the model data structures handed to the exporter.

Components:
----------
- Variable: A decision variable with bounds and integrality
- Constraint: A linear row with lower/upper bounds
- Objective: Sparse linear objective with offset and sense
- Model: Container tying variables, constraints and objective together
- ModelBuilder: Fluent construction helper
"""

from mpexport.core.model import (
    INFINITY,
    Constraint,
    Model,
    ModelBuilder,
    Objective,
    ObjectiveSense,
    Variable,
)

__all__ = [
    "INFINITY",
    # Model components
    "Variable",
    "Constraint",
    "Objective",
    "ObjectiveSense",
    # Model definition
    "Model",
    "ModelBuilder",
]
