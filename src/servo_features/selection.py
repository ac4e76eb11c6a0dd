"""
Feature Component Selection

A selector chooses which components of a feature (rows of s, L and the error)
take part in the current control cycle. Selectors are either an integer
bitmask (bit i selects component i) or an iterable of component indices:

    select = feature_line(0) | feature_line(2)   # components 0 and 2
    select = [0, 2]                              # same thing
    select = FEATURE_ALL                         # every component

Feature code should only ask is_selected() / selected_indices(), never look
at the bits directly.
"""

import numbers
from typing import Iterable, List, Union

from servo_features.errors import DimensionMismatchError

# All bits set, so it selects every component whatever the dimension.
FEATURE_ALL = -1

Selector = Union[int, Iterable[int]]


def feature_line(i: int) -> int:
    """Return the selector bit for component i."""
    if i < 0:
        raise ValueError(f"Component index must be non-negative, got {i}")
    return 1 << i


def is_selected(select: Selector, i: int) -> bool:
    """Check whether component i is part of the selection."""
    if isinstance(select, numbers.Integral):
        return bool(int(select) & (1 << i))
    return i in _index_set(select)


def selected_indices(select: Selector, dim: int) -> List[int]:
    """
    Expand a selector into the ascending list of selected component indices.

    Args:
        select: Integer bitmask or iterable of component indices
        dim: Feature dimension

    Returns:
        list: Selected indices in [0, dim), ascending

    Raises:
        DimensionMismatchError: An explicit index is outside [0, dim)
        TypeError: An entry is not an integer index (booleans included)
    """
    if isinstance(select, numbers.Integral):
        # Bits past dim are ignored (FEATURE_ALL has all of them set)
        return [i for i in range(dim) if is_selected(select, i)]

    indices = sorted(_index_set(select))
    for i in indices:
        if i < 0 or i >= dim:
            raise DimensionMismatchError(
                f"Selected component {i} out of range for feature of dimension {dim}"
            )
    return indices


def _index_set(select: Iterable[int]) -> set:
    indices = set()
    for k in select:
        if isinstance(k, bool) or not isinstance(k, numbers.Integral):
            raise TypeError(
                f"Selector entries must be integer component indices, got {k!r}"
            )
        indices.add(int(k))
    return indices
