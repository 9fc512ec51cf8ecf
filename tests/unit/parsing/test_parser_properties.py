"""Property tests: serialized constraints parse back to equal constraints."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from parameter_validation.constraints import (
    Constraint,
    MaximumValueConstraint,
    MinimumLengthConstraint,
    RegexConstraint,
    RegexOption,
)
from parameter_validation.domain.data_types import ParameterDataType as DT
from parameter_validation.parsing import ConstraintParser, concat_constraints

_PARAMETER_TEXT = st.text(alphabet="ab9 ,()[]'", max_size=6)
_PATTERNS = st.sampled_from(["^a+$", "[a-z]{2,4}", "x|y", "it''s", "(a,b)", r"\d+ \w*"])


@settings(max_examples=40, deadline=None)
@given(parameters=st.lists(_PARAMETER_TEXT, max_size=5))
def test_masked_parameters_round_trip(
    dummy_parser: ConstraintParser, parameters: list[str]
) -> None:
    constraint = dummy_parser.factory.find_constraint("Dummy", DT.INT32)
    constraint.set_parameters(tuple(parameters), DT.INT32)

    (parsed,) = dummy_parser.parse(constraint.to_string(), DT.INT32)
    assert parsed.parameters == tuple(parameters)


def _constraints() -> st.SearchStrategy[Constraint]:
    return st.one_of(
        st.integers(min_value=0, max_value=10**6).map(MinimumLengthConstraint),
        st.builds(
            RegexConstraint,
            _PATTERNS,
            st.lists(st.sampled_from(list(RegexOption)), max_size=2, unique=True),
        ),
    )


@settings(max_examples=40, deadline=None)
@given(constraints=st.lists(_constraints(), max_size=4))
def test_string_constraints_round_trip(constraints: list[Constraint]) -> None:
    text = concat_constraints(constraints)
    assert text is not None
    assert ConstraintParser().parse(text, DT.STRING) == constraints


@settings(max_examples=40, deadline=None)
@given(bound=st.integers(min_value=-(2**31), max_value=2**31 - 1))
def test_integer_bounds_round_trip(bound: int) -> None:
    constraint = MaximumValueConstraint(DT.INT32, bound)
    (parsed,) = ConstraintParser().parse(constraint.to_string(), DT.INT32)
    assert parsed == constraint
    assert parsed.maximum == bound  # type: ignore[attr-defined]
