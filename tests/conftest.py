"""
Shared pytest fixtures for mpexport tests.
"""

import math

import pytest

from mpexport.core.model import Constraint, Model, Objective, ObjectiveSense, Variable


def pytest_configure(config):
    """Add custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


def create_mixed_model(sense: ObjectiveSense = ObjectiveSense.MINIMIZE) -> Model:
    """
    A small mixed-integer model covering every row and bound shape.

    Variables:
        0: x  continuous [0, inf)
        1: y  binary
        2: z  integer [0, 10]
        3: w  continuous free

    Constraints:
        c1:  x + y >= 2
        r:   2 <= x - z <= 5      (range)
        e:   x + 2 w = 4
        cap: 3 y + 4 z <= 10

    Objective: x + 2 y - 3 z
    """
    return Model(
        name="mixed",
        variables=[
            Variable("x"),
            Variable("y", 0, 1, is_integer=True),
            Variable("z", 0, 10, is_integer=True),
            Variable("w", -math.inf, math.inf),
        ],
        constraints=[
            Constraint("c1", 2, math.inf, {0: 1.0, 1: 1.0}),
            Constraint("r", 2, 5, {0: 1.0, 2: -1.0}),
            Constraint("e", 4, 4, {0: 1.0, 3: 2.0}),
            Constraint("cap", -math.inf, 10, {1: 3.0, 2: 4.0}),
        ],
        objective=Objective({0: 1.0, 1: 2.0, 2: -3.0}, sense=sense),
    )


@pytest.fixture
def mixed_model():
    """The mixed-integer model described in create_mixed_model()."""
    return create_mixed_model()


@pytest.fixture
def make_mixed_model():
    """Factory for the mixed model with a chosen objective sense."""
    return create_mixed_model


@pytest.fixture
def maximize_model():
    """maximize x subject to x <= 4."""
    return Model(
        name="max",
        variables=[Variable("x")],
        constraints=[Constraint("c", -math.inf, 4, {0: 1.0})],
        objective=Objective({0: 1.0}, sense=ObjectiveSense.MAXIMIZE),
    )


@pytest.fixture
def bad_index_model():
    """A constraint referencing variable 5 in a one-variable model."""
    return Model(
        name="bad",
        variables=[Variable("x")],
        constraints=[Constraint("c", 1, math.inf, {0: 1.0, 5: 2.0})],
        objective=Objective({0: 1.0}),
    )


def _section_lines(text: str, section: str) -> list:
    """Lines of an MPS section, between its header and the next header."""
    lines = text.splitlines()
    start = lines.index(section) + 1
    end = start
    while end < len(lines) and lines[end][:1] in (" ", ""):
        end += 1
    return lines[start:end]


@pytest.fixture
def section_lines():
    """Helper extracting the data lines of one MPS section."""
    return _section_lines
