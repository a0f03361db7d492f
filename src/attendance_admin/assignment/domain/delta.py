"""Set difference between a manager's current and desired sites."""

from typing import Iterable

from .entities import AssignmentDelta


def _ordered_unique(site_ids: Iterable[int]) -> tuple[int, ...]:
    return tuple(dict.fromkeys(site_ids))


def diff_assignments(current: Iterable[int], desired: Iterable[int]) -> AssignmentDelta:
    """Compute the add/remove delta that turns ``current`` into ``desired``.

    ``to_add = desired - current`` and ``to_remove = current - desired``,
    each in the iteration order of its source. Equal sets yield an empty
    delta, which callers treat as "no changes".

    Examples:
        diff_assignments({1, 2, 3}, {2, 3, 4}) -> to_add=(4,), to_remove=(1,)
        diff_assignments([5, 6], [6, 5]) -> empty
    """
    current_ids = _ordered_unique(current)
    desired_ids = _ordered_unique(desired)

    current_set = set(current_ids)
    desired_set = set(desired_ids)
    if current_set == desired_set:
        return AssignmentDelta()

    return AssignmentDelta(
        to_add=tuple(s for s in desired_ids if s not in current_set),
        to_remove=tuple(s for s in current_ids if s not in desired_set),
    )
