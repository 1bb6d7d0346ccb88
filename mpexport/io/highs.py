"""
HiGHS adapter.

Builds a Model from a highspy.Highs instance, so any model HiGHS can hold
(including one it read from an LP or MPS file) can be handed to the exporter.

Usage:
    >>> import highspy
    >>> from mpexport.io.highs import model_from_highs
    >>> h = highspy.Highs()
    >>> h.readModel("afiro.mps")
    >>> model = model_from_highs(h)
"""

import math
from typing import Dict, List, Optional

try:
    import highspy
    HIGHS_AVAILABLE = True
except ImportError:
    HIGHS_AVAILABLE = False

from mpexport.core.model import Constraint, Model, Objective, ObjectiveSense, Variable


def _to_bound(value: float) -> float:
    """Map HiGHS infinite values onto +/- math.inf."""
    if value >= highspy.kHighsInf:
        return math.inf
    if value <= -highspy.kHighsInf:
        return -math.inf
    return float(value)


def _name(names: List[str], index: int) -> Optional[str]:
    if index < len(names) and names[index]:
        return names[index]
    return None


def model_from_highs(highs: 'highspy.Highs', name: Optional[str] = None) -> Model:
    """
    Convert the model held by a HiGHS instance.

    Args:
        highs: A highspy.Highs instance with a model loaded
        name: Model name (default: the name HiGHS holds)

    Returns:
        The equivalent Model

    Raises:
        ImportError: If highspy is not installed
    """
    if not HIGHS_AVAILABLE:
        raise ImportError(
            "HiGHS is not available. Install it with: pip install highspy"
        )

    lp = highs.getLp()
    num_col = lp.num_col_
    num_row = lp.num_row_

    integrality = list(lp.integrality_)
    col_names = list(lp.col_names_)
    row_names = list(lp.row_names_)

    variables = []
    for j in range(num_col):
        is_integer = (
            j < len(integrality)
            and integrality[j] == highspy.HighsVarType.kInteger
        )
        variables.append(Variable(
            _name(col_names, j),
            _to_bound(lp.col_lower_[j]),
            _to_bound(lp.col_upper_[j]),
            is_integer,
        ))

    rows: List[Dict[int, float]] = [{} for _ in range(num_row)]
    matrix = lp.a_matrix_
    starts = list(matrix.start_)
    indices = list(matrix.index_)
    values = list(matrix.value_)
    if matrix.format_ == highspy.MatrixFormat.kRowwise:
        for i in range(num_row):
            for k in range(starts[i], starts[i + 1]):
                rows[i][int(indices[k])] = float(values[k])
    else:
        for j in range(num_col):
            for k in range(starts[j], starts[j + 1]):
                rows[int(indices[k])][j] = float(values[k])

    constraints = [
        Constraint(
            _name(row_names, i),
            _to_bound(lp.row_lower_[i]),
            _to_bound(lp.row_upper_[i]),
            rows[i],
        )
        for i in range(num_row)
    ]

    sense = (
        ObjectiveSense.MAXIMIZE
        if lp.sense_ == highspy.ObjSense.kMaximize
        else ObjectiveSense.MINIMIZE
    )
    objective = Objective(
        {j: float(c) for j, c in enumerate(lp.col_cost_) if c != 0.0},
        offset=float(lp.offset_),
        sense=sense,
    )

    return Model(
        name=name if name is not None else lp.model_name_,
        variables=variables,
        constraints=constraints,
        objective=objective,
    )
