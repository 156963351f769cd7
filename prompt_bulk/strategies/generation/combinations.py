"""Cartesian product of variable value-lists."""

import itertools
import math
from collections.abc import Mapping, Sequence


def _value_lists_for(
    variable_names: Sequence[str],
    value_lists: Mapping[str, Sequence[str]],
) -> list[Sequence[str]]:
    lists = []
    for name in variable_names:
        values = value_lists.get(name)
        if not values:
            raise ValueError(f"No values supplied for variable {name!r}")
        lists.append(values)
    return lists


def count_combinations(
    variable_names: Sequence[str],
    value_lists: Mapping[str, Sequence[str]],
) -> int:
    """Number of assignments :func:`generate_combinations` would return."""
    return math.prod(len(values) for values in _value_lists_for(variable_names, value_lists))


def generate_combinations(
    variable_names: Sequence[str],
    value_lists: Mapping[str, Sequence[str]],
) -> list[dict[str, str]]:
    """Enumerate every assignment of one value per variable.

    Assignments are ordered lexicographically over *variable_names*: the
    last variable's values vary fastest. No variables yields a single empty
    assignment. Values for names not in *variable_names* are ignored.

    Args:
        variable_names: Ordered variable names to assign.
        value_lists: Mapping from variable name to candidate values.

    Returns:
        List of mappings from variable name to a single value.

    Raises:
        ValueError: If a listed variable has no values. Callers must check
            completeness first.

    Example::

        generate_combinations(["A", "B"], {"A": ["a1", "a2"], "B": ["b1", "b2"]})
        # => [{"A": "a1", "B": "b1"}, {"A": "a1", "B": "b2"},
        #     {"A": "a2", "B": "b1"}, {"A": "a2", "B": "b2"}]
    """
    names = list(variable_names)
    lists = _value_lists_for(names, value_lists)
    return [dict(zip(names, combo)) for combo in itertools.product(*lists)]
