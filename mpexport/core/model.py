"""
Model module - the in-memory linear / mixed-integer model to export.

A Model is an ordered sequence of variables, an ordered sequence of
constraints and one objective. Variables and constraints are identified by
their position: coefficient maps are keyed by the 0-based variable index.

Design Notes:
------------
- All classes are frozen dataclasses: the exporter borrows a model and must
  never see it change under its feet
- Names are optional; the exporter generates legal names when absent
- Bounds use +/- math.inf for "no bound"
- Coefficient maps keep insertion order, which the writers reuse as the
  stable term order within one export

Usage Patterns:
--------------
1. Direct construction: Model(variables=[...], constraints=[...], objective=...)
2. Fluent construction: ModelBuilder("name").add_variable(...).build()
3. Array construction: Model.from_arrays(cost, matrix, ...)
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np


INFINITY = math.inf


class ObjectiveSense(Enum):
    """Direction of optimization."""
    MINIMIZE = auto()
    MAXIMIZE = auto()


@dataclass(frozen=True)
class Variable:
    """
    A decision variable.

    Attributes:
        name: Optional name (None or "" means "generate one")
        lower_bound: Lower bound (-inf for none)
        upper_bound: Upper bound (+inf for none)
        is_integer: True for integer variables

    Example:
        >>> x = Variable("x", 0.0, 10.0, is_integer=True)
        >>> x.is_binary
        False
    """
    name: Optional[str] = None
    lower_bound: float = 0.0
    upper_bound: float = INFINITY
    is_integer: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'lower_bound', float(self.lower_bound))
        object.__setattr__(self, 'upper_bound', float(self.upper_bound))
        object.__setattr__(self, 'is_integer', bool(self.is_integer))

    @property
    def is_binary(self) -> bool:
        """Integer variable with bounds exactly [0, 1]."""
        return (
            self.is_integer
            and self.lower_bound == 0.0
            and self.upper_bound == 1.0
        )

    @property
    def is_free(self) -> bool:
        return self.lower_bound == -INFINITY and self.upper_bound == INFINITY

    @property
    def is_fixed(self) -> bool:
        return self.lower_bound == self.upper_bound

    @property
    def has_writable_bounds(self) -> bool:
        """False for NaN bounds, a +inf lower bound or a -inf upper bound."""
        return self.lower_bound < INFINITY and self.upper_bound > -INFINITY

    @property
    def has_default_bounds(self) -> bool:
        """True for bounds [0, +inf), the implicit default of LP and MPS."""
        return self.lower_bound == 0.0 and self.upper_bound == INFINITY


@dataclass(frozen=True)
class Constraint:
    """
    A linear constraint: lower_bound <= sum(coef * x[index]) <= upper_bound.

    Attributes:
        name: Optional name
        lower_bound: Lower bound (-inf for none)
        upper_bound: Upper bound (+inf for none)
        coefficients: Mapping from variable index to coefficient
    """
    name: Optional[str] = None
    lower_bound: float = -INFINITY
    upper_bound: float = INFINITY
    coefficients: Dict[int, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'lower_bound', float(self.lower_bound))
        object.__setattr__(self, 'upper_bound', float(self.upper_bound))
        object.__setattr__(
            self, 'coefficients',
            {int(k): float(v) for k, v in dict(self.coefficients).items()}
        )

    @property
    def is_equality(self) -> bool:
        return self.lower_bound == self.upper_bound

    @property
    def is_free(self) -> bool:
        """No finite bound at all."""
        return self.lower_bound == -INFINITY and self.upper_bound == INFINITY

    @property
    def is_range(self) -> bool:
        """Two distinct finite bounds."""
        return (
            math.isfinite(self.lower_bound)
            and math.isfinite(self.upper_bound)
            and self.lower_bound != self.upper_bound
        )


@dataclass(frozen=True)
class Objective:
    """
    Linear objective: sense sum(coef * x[index]) + offset.

    Attributes:
        coefficients: Mapping from variable index to coefficient
        offset: Constant term
        sense: MINIMIZE or MAXIMIZE
    """
    coefficients: Dict[int, float] = field(default_factory=dict)
    offset: float = 0.0
    sense: ObjectiveSense = ObjectiveSense.MINIMIZE

    def __post_init__(self):
        object.__setattr__(self, 'offset', float(self.offset))
        object.__setattr__(
            self, 'coefficients',
            {int(k): float(v) for k, v in dict(self.coefficients).items()}
        )

    @property
    def maximize(self) -> bool:
        return self.sense == ObjectiveSense.MAXIMIZE


@dataclass(frozen=True)
class Model:
    """
    Container for a linear / mixed-integer model.

    The Model itself doesn't export anything - it's handed to
    ModelExporter, which borrows it for the duration of one export call.

    Attributes:
        name: Model name (written to the NAME section / LP header)
        variables: Ordered variables
        constraints: Ordered constraints
        objective: The objective function

    Example:
        >>> model = Model(
        ...     name="tiny",
        ...     variables=[Variable("x"), Variable("y", is_integer=True, upper_bound=1)],
        ...     constraints=[Constraint("c1", 2, 5, {0: 1.0, 1: 1.0})],
        ...     objective=Objective({0: 1.0, 1: 2.0}),
        ... )
        >>> model.num_variables
        2
    """
    name: str = ""
    variables: Tuple[Variable, ...] = ()
    constraints: Tuple[Constraint, ...] = ()
    objective: Objective = field(default_factory=Objective)

    def __post_init__(self):
        """Ensure sequences are tuples."""
        if not isinstance(self.variables, tuple):
            object.__setattr__(self, 'variables', tuple(self.variables))
        if not isinstance(self.constraints, tuple):
            object.__setattr__(self, 'constraints', tuple(self.constraints))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def has_integer_variables(self) -> bool:
        return any(v.is_integer for v in self.variables)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> List[str]:
        """
        Validate the model structure.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        n = self.num_variables

        for i, var in enumerate(self.variables):
            if not var.has_writable_bounds:
                errors.append(
                    f"Variable {i} has bounds [{var.lower_bound}, {var.upper_bound}] "
                    f"that cannot be written"
                )
            elif var.lower_bound > var.upper_bound:
                errors.append(
                    f"Variable {i} has lower bound {var.lower_bound} "
                    f"above upper bound {var.upper_bound}"
                )

        for index, coeff in self.objective.coefficients.items():
            if not 0 <= index < n:
                errors.append(f"Objective references out-of-range variable {index}")
            if not math.isfinite(coeff):
                errors.append(f"Objective coefficient of variable {index} is not finite")

        for i, ct in enumerate(self.constraints):
            if ct.lower_bound > ct.upper_bound:
                errors.append(
                    f"Constraint {i} has lower bound {ct.lower_bound} "
                    f"above upper bound {ct.upper_bound}"
                )
            for index, coeff in ct.coefficients.items():
                if not 0 <= index < n:
                    errors.append(
                        f"Constraint {i} references out-of-range variable {index}"
                    )
                if not math.isfinite(coeff):
                    errors.append(
                        f"Constraint {i} coefficient of variable {index} is not finite"
                    )

        return errors

    def is_valid(self) -> bool:
        """Check if model is valid."""
        return len(self.validate()) == 0

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @classmethod
    def from_arrays(
        cls,
        cost: Sequence[float],
        matrix: Sequence[Sequence[float]],
        row_lower: Sequence[float],
        row_upper: Sequence[float],
        col_lower: Optional[Sequence[float]] = None,
        col_upper: Optional[Sequence[float]] = None,
        integrality: Optional[Sequence[bool]] = None,
        offset: float = 0.0,
        sense: ObjectiveSense = ObjectiveSense.MINIMIZE,
        variable_names: Optional[Sequence[Optional[str]]] = None,
        constraint_names: Optional[Sequence[Optional[str]]] = None,
        name: str = "",
    ) -> 'Model':
        """
        Build a model from dense arrays.

        Zero entries of `cost` and `matrix` are dropped.

        Args:
            cost: Objective coefficients, one per variable
            matrix: Constraint matrix of shape (num_constraints, num_variables)
            row_lower: Constraint lower bounds
            row_upper: Constraint upper bounds
            col_lower: Variable lower bounds (default 0)
            col_upper: Variable upper bounds (default +inf)
            integrality: Integrality flags (default all continuous)

        Returns:
            The constructed Model

        Raises:
            ValueError: If array shapes disagree
        """
        c = np.asarray(cost, dtype=float).ravel()
        n = c.shape[0]
        a = np.asarray(matrix, dtype=float)
        if a.size == 0:
            a = a.reshape(len(row_lower), n)
        if a.ndim != 2 or a.shape[1] != n:
            raise ValueError(
                f"Matrix shape {a.shape} does not match {n} variables"
            )
        m = a.shape[0]

        rl = np.asarray(row_lower, dtype=float).ravel()
        ru = np.asarray(row_upper, dtype=float).ravel()
        if rl.shape[0] != m or ru.shape[0] != m:
            raise ValueError(f"Row bounds must have length {m}")

        cl = np.zeros(n) if col_lower is None else np.asarray(col_lower, dtype=float).ravel()
        cu = np.full(n, np.inf) if col_upper is None else np.asarray(col_upper, dtype=float).ravel()
        ints = np.zeros(n, dtype=bool) if integrality is None else np.asarray(integrality, dtype=bool).ravel()
        if cl.shape[0] != n or cu.shape[0] != n or ints.shape[0] != n:
            raise ValueError(f"Column data must have length {n}")

        var_names = list(variable_names) if variable_names is not None else [None] * n
        con_names = list(constraint_names) if constraint_names is not None else [None] * m

        variables = [
            Variable(var_names[j], cl[j], cu[j], bool(ints[j]))
            for j in range(n)
        ]
        constraints = []
        for i in range(m):
            nz = np.flatnonzero(a[i])
            constraints.append(Constraint(
                con_names[i], rl[i], ru[i],
                {int(j): float(a[i, j]) for j in nz}
            ))
        objective = Objective(
            {int(j): float(c[j]) for j in np.flatnonzero(c)},
            offset=offset,
            sense=sense,
        )
        return cls(name=name, variables=variables, constraints=constraints, objective=objective)

    # =========================================================================
    # Summary and Display
    # =========================================================================

    def summary(self) -> str:
        """
        Return a human-readable summary.

        Returns:
            Summary string
        """
        num_binary = sum(1 for v in self.variables if v.is_binary)
        num_integer = sum(1 for v in self.variables if v.is_integer) - num_binary
        num_ranges = sum(1 for c in self.constraints if c.is_range)
        lines = [
            f"Model: {self.name or 'NoName'}",
            f"  Objective: {self.objective.sense.name}",
            f"  Variables: {self.num_variables}",
            f"    Binary: {num_binary}",
            f"    Integer: {num_integer}",
            f"    Continuous: {self.num_variables - num_binary - num_integer}",
            f"  Constraints: {self.num_constraints}",
            f"    Ranges: {num_ranges}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Model('{self.name}', "
            f"variables={self.num_variables}, "
            f"constraints={self.num_constraints}, "
            f"sense={self.objective.sense.name})"
        )


# =============================================================================
# Model Builder (Fluent Interface)
# =============================================================================

class ModelBuilder:
    """
    Fluent interface for building models.

    Example:
        >>> model = (ModelBuilder("knapsack")
        ...     .add_variable("x", upper_bound=1, is_integer=True)
        ...     .add_variable("y", upper_bound=1, is_integer=True)
        ...     .add_constraint("cap", upper_bound=5, coefficients={0: 3, 1: 4})
        ...     .set_objective({0: -2, 1: -3})
        ...     .build())
    """

    def __init__(self, name: str = ""):
        """
        Start building a model.

        Args:
            name: Model name
        """
        self._name = name
        self._variables: List[Variable] = []
        self._constraints: List[Constraint] = []
        self._objective_coefficients: Dict[int, float] = {}
        self._offset = 0.0
        self._sense = ObjectiveSense.MINIMIZE

    @property
    def num_variables(self) -> int:
        return len(self._variables)

    def add_variable(
        self,
        name: Optional[str] = None,
        lower_bound: float = 0.0,
        upper_bound: float = INFINITY,
        is_integer: bool = False,
        objective_coefficient: float = 0.0,
    ) -> 'ModelBuilder':
        """Add a variable; its index is the number of variables added before it."""
        index = len(self._variables)
        self._variables.append(Variable(name, lower_bound, upper_bound, is_integer))
        if objective_coefficient != 0.0:
            self._objective_coefficients[index] = objective_coefficient
        return self

    def add_constraint(
        self,
        name: Optional[str] = None,
        lower_bound: float = -INFINITY,
        upper_bound: float = INFINITY,
        coefficients: Optional[Dict[int, float]] = None,
    ) -> 'ModelBuilder':
        """Add a constraint."""
        self._constraints.append(
            Constraint(name, lower_bound, upper_bound, coefficients or {})
        )
        return self

    def set_objective(
        self,
        coefficients: Dict[int, float],
        offset: float = 0.0,
    ) -> 'ModelBuilder':
        """Replace the objective coefficients and offset."""
        self._objective_coefficients = dict(coefficients)
        self._offset = offset
        return self

    def minimize(self) -> 'ModelBuilder':
        """Set objective to minimize."""
        self._sense = ObjectiveSense.MINIMIZE
        return self

    def maximize(self) -> 'ModelBuilder':
        """Set objective to maximize."""
        self._sense = ObjectiveSense.MAXIMIZE
        return self

    def build(self) -> Model:
        """
        Build and return the Model.

        Returns:
            The constructed Model

        Raises:
            ValueError: If model is not valid
        """
        model = self.build_unchecked()
        errors = model.validate()
        if errors:
            raise ValueError(
                f"Invalid model:\n" + "\n".join(f"  - {e}" for e in errors)
            )
        return model

    def build_unchecked(self) -> Model:
        """
        Build without validation.

        Returns:
            The constructed Model (may reference out-of-range variables)
        """
        return Model(
            name=self._name,
            variables=tuple(self._variables),
            constraints=tuple(self._constraints),
            objective=Objective(
                self._objective_coefficients, self._offset, self._sense
            ),
        )
