"""Tests for problem assembly and constraint storage."""

import numpy as np
import pytest

from nlpmodel.errors import InvariantViolation, ProblemError
from nlpmodel.function import (
    AutogradFunction,
    DifferentiableFunction,
    Interval,
    NumericLinearFunction,
    make_infinite_interval,
)
from nlpmodel.problem import ConstraintEntry, Problem, UnconstrainedProblem


def _snapshot(problem: Problem):
    return (len(problem.constraints), problem.bounds, problem.scales)


def test_defaults(objective):
    problem = Problem(objective)
    assert problem.function is objective
    assert problem.constraints == ()
    assert problem.bounds == ()
    assert problem.scales == ()
    assert problem.argument_bounds == [make_infinite_interval()] * 2
    assert problem.argument_scales == [1.0, 1.0]
    assert problem.starting_point is None
    assert problem.number_of_constraints == 0


def test_objective_must_be_scalar():
    vector_valued = NumericLinearFunction(np.eye(2), np.zeros(2))
    with pytest.raises(InvariantViolation, match="scalar"):
        Problem(vector_valued)
    with pytest.raises(InvariantViolation):
        Problem(None)  # type: ignore[arg-type]


def test_single_output_constraint(objective, scalar_constraint):
    """Bound (0, 10) and scale 1.0 on a scalar constraint."""
    problem = Problem(objective)
    entry = problem.add_constraint(scalar_constraint, (0, 10), 1.0)

    assert problem.bounds == (Interval(0.0, 10.0),)
    assert problem.scales == (1.0,)
    assert len(problem.constraints) == 1
    assert isinstance(entry, ConstraintEntry)
    assert entry.function is scalar_constraint
    assert entry.kind is DifferentiableFunction


def test_multi_output_constraint(objective, scalar_constraint, triple_constraint):
    """Three outputs add three bounds and three scales but a single entry."""
    problem = Problem(objective)
    problem.add_constraint(scalar_constraint, (0, 10))
    before = len(problem.constraints)

    problem.add_constraint(triple_constraint, [(0, 1), (0, 1), (0, 1)], 2.0)

    assert len(problem.constraints) == before + 1
    assert problem.bounds[1:] == (Interval(0.0, 1.0),) * 3
    assert problem.scales[1:] == (2.0, 2.0, 2.0)
    assert problem.number_of_constraints == 4


def test_per_output_scales(objective, triple_constraint):
    problem = Problem(objective)
    problem.add_constraint(triple_constraint, [(0, 1), (-1, 1), (0, 5)], [1.0, 2.0, 3.0])
    assert problem.scales == (1.0, 2.0, 3.0)
    assert problem.bounds[2] == Interval(0.0, 5.0)


def test_bound_and_scale_counts_track_outputs(objective, rng):
    problem = Problem(objective)
    expected = 0
    for _ in range(6):
        m = int(rng.integers(1, 4))
        constraint = NumericLinearFunction(rng.normal(size=(m, 2)), rng.normal(size=m))
        bounds = (-1.0, 1.0) if m == 1 else [(-1.0, 1.0)] * m
        problem.add_constraint(constraint, bounds, 0.5)
        expected += m
        assert len(problem.bounds) == len(problem.scales) == expected
        assert expected == sum(entry.output_size for entry in problem.constraints)


def test_wrong_input_size_leaves_problem_unchanged(objective, scalar_constraint):
    problem = Problem(objective)
    problem.add_constraint(scalar_constraint, (0, 10))
    before = _snapshot(problem)

    wide = NumericLinearFunction(np.ones((1, 3)), np.zeros(1))
    with pytest.raises(ProblemError, match="wrong input size"):
        problem.add_constraint(wide, (0, 1))

    assert _snapshot(problem) == before


def test_wrong_bound_count_leaves_problem_unchanged(objective, triple_constraint):
    problem = Problem(objective)
    before = _snapshot(problem)

    with pytest.raises(ProblemError, match="does not match"):
        problem.add_constraint(triple_constraint, [(0, 1), (0, 1)], 1.0)
    with pytest.raises(ProblemError, match="output size is not equal to one"):
        problem.add_constraint(triple_constraint, (0, 1), 1.0)
    with pytest.raises(ProblemError, match="scales"):
        problem.add_constraint(triple_constraint, [(0, 1)] * 3, [1.0, 2.0])

    assert _snapshot(problem) == before


def test_programmer_errors_are_invariant_violations(objective, scalar_constraint, triple_constraint):
    problem = Problem(objective)
    before = _snapshot(problem)

    with pytest.raises(InvariantViolation, match="null"):
        problem.add_constraint(None, (0, 1))  # type: ignore[arg-type]
    with pytest.raises(InvariantViolation):
        problem.add_constraint(scalar_constraint, (1, 0))
    with pytest.raises(InvariantViolation):
        problem.add_constraint(triple_constraint, [(0, 1), (2, 1), (0, 1)])

    assert _snapshot(problem) == before


def test_invariant_violation_is_not_a_problem_error():
    assert not issubclass(InvariantViolation, ProblemError)
    assert issubclass(InvariantViolation, AssertionError)
    assert issubclass(ProblemError, ValueError)


def test_constraint_kinds_are_enforced(objective, scalar_constraint, circle):
    problem = Problem(objective, constraint_kinds=(NumericLinearFunction,))
    problem.add_constraint(scalar_constraint, (0, 1))
    with pytest.raises(TypeError, match="admissible"):
        problem.add_constraint(circle, (0, 1))
    assert len(problem.constraints) == 1


def test_heterogeneous_constraints_are_tagged(objective, scalar_constraint, circle):
    problem = Problem(objective, constraint_kinds=(NumericLinearFunction, AutogradFunction))
    problem.add_constraint(scalar_constraint, (0, 1))
    problem.add_constraint(circle, (0, 4))
    kinds = [entry.kind for entry in problem.constraints]
    assert kinds == [NumericLinearFunction, AutogradFunction]
    assert problem.constraint_kinds == (NumericLinearFunction, AutogradFunction)


def test_single_kind_may_be_given_without_tuple(objective, scalar_constraint):
    problem = Problem(objective, constraint_kinds=NumericLinearFunction)
    assert problem.constraint_kinds == (NumericLinearFunction,)
    problem.add_constraint(scalar_constraint, (0, 1))


def test_invalid_kind_sets(objective):
    with pytest.raises(TypeError):
        Problem(objective, constraint_kinds=(int,))
    with pytest.raises(TypeError, match="UnconstrainedProblem"):
        Problem(objective, constraint_kinds=())


def test_constraints_are_shared_not_copied(objective):
    A = np.array([[1.0, 0.0]])
    constraint = NumericLinearFunction(A, np.zeros(1))
    problem = Problem(objective)
    problem.add_constraint(constraint, (0, 1))
    constraint.A[0, 0] = 5.0
    assert problem.constraints[0].function.A[0, 0] == 5.0


def test_starting_point_round_trip(objective):
    problem = Problem(objective)
    problem.starting_point = [1.0, 2.0]
    np.testing.assert_array_equal(problem.starting_point, [1.0, 2.0])
    problem.starting_point = None
    assert problem.starting_point is None


def test_starting_point_wrong_size_rejected(objective):
    problem = Problem(objective)
    problem.starting_point = [1.0, 2.0]
    with pytest.raises(ProblemError, match="wrong size"):
        problem.starting_point = [1.0, 2.0, 3.0]
    np.testing.assert_array_equal(problem.starting_point, [1.0, 2.0])


def test_starting_point_revalidated_on_read(objective):
    problem = Problem(objective)
    problem._starting_point = np.zeros(5)
    with pytest.raises(ProblemError, match="wrong size"):
        problem.starting_point


def test_argument_bounds_and_scales(objective):
    problem = Problem(objective)
    problem.argument_bounds[0] = Interval(0.0, 1.0)
    assert problem.argument_bounds[0] == (0.0, 1.0)

    problem.argument_bounds = [(0, 1), (-2, 2)]
    assert problem.argument_bounds == [Interval(0.0, 1.0), Interval(-2.0, 2.0)]
    with pytest.raises(ProblemError):
        problem.argument_bounds = [(0, 1)]
    with pytest.raises(InvariantViolation):
        problem.argument_bounds = [(0, 1), (3, 2)]

    problem.argument_scales = [2, 3]
    assert problem.argument_scales == [2.0, 3.0]
    with pytest.raises(ProblemError):
        problem.argument_scales = [1.0, 1.0, 1.0]


def test_copy_is_independent(objective, scalar_constraint, triple_constraint):
    problem = Problem(objective)
    problem.add_constraint(scalar_constraint, (0, 10))
    problem.starting_point = [1.0, 1.0]
    clone = problem.copy()

    clone.add_constraint(triple_constraint, [(0, 1)] * 3)
    clone.argument_scales[0] = 9.0

    assert len(problem.constraints) == 1
    assert len(clone.constraints) == 2
    assert problem.argument_scales[0] == 1.0
    assert clone.constraints[0].function is scalar_constraint
    np.testing.assert_array_equal(clone.starting_point, problem.starting_point)
    assert clone.starting_point is not problem.starting_point


def test_convert_to_other_kind_set(objective, scalar_constraint, circle):
    problem = Problem(objective, constraint_kinds=(DifferentiableFunction,))
    problem.add_constraint(scalar_constraint, (0, 1))
    narrowed = problem.convert((NumericLinearFunction,))
    assert narrowed.constraints[0].kind is NumericLinearFunction
    assert narrowed.bounds == problem.bounds

    problem.add_constraint(circle, (0, 4))
    with pytest.raises(TypeError):
        problem.convert((NumericLinearFunction,))


def test_unconstrained_problem(objective):
    problem = UnconstrainedProblem(objective)
    assert problem.constraints == ()
    assert problem.bounds == ()
    assert problem.scales == ()
    assert problem.argument_scales == [1.0, 1.0]

    problem.starting_point = [0.5, 0.5]
    with pytest.raises(ProblemError, match="wrong size"):
        problem.starting_point = [0.5]
    clone = problem.copy()
    assert isinstance(clone, UnconstrainedProblem)
    np.testing.assert_array_equal(clone.starting_point, [0.5, 0.5])
    assert not hasattr(problem, "add_constraint")


def test_create_selects_specialization(objective):
    assert isinstance(Problem.create(objective, ()), UnconstrainedProblem)
    created = Problem.create(objective, (NumericLinearFunction,))
    assert isinstance(created, Problem)
    assert created.constraint_kinds == (NumericLinearFunction,)


def test_none_marks_a_free_bound(objective, scalar_constraint, triple_constraint):
    problem = Problem(objective)
    problem.argument_bounds = [(None, 1), (0, None)]
    assert problem.argument_bounds == [Interval(-np.inf, 1.0), Interval(0.0, np.inf)]

    problem.add_constraint(scalar_constraint, (None, 0))
    problem.add_constraint(triple_constraint, [(0, None), (None, None), (0, 1)])
    assert problem.bounds == (
        Interval(-np.inf, 0.0),
        Interval(0.0, np.inf),
        make_infinite_interval(),
        Interval(0.0, 1.0),
    )
