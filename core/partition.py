"""Splitting a sorted roster into contiguous portions for several graders.

Nothing is coordinated between graders: every grader runs the tool with the
same division count and picks a different portion index. The split only
depends on the sorted roster, so re-running with the same inputs always
yields the same entries.
"""

from typing import Callable, List, Sequence, TypeVar

from core.models import Portion, UserSubmission
from utils.error_handler import InvalidSelectionError
from utils.logger import get_logger

logger = get_logger()

T = TypeVar('T')


def by_sortable_name(entry: UserSubmission) -> str:
    return entry.sortable_name


def sort_roster(entries: Sequence[T], key: Callable[[T], str] = by_sortable_name) -> List[T]:
    """Stable ascending sort of the roster."""
    return sorted(entries, key=key)


def compute_portions(total: int, divisions: int) -> List[Portion]:
    """Divides ``total`` roster indices into ``divisions`` contiguous portions.

    Every portion holds ``total // divisions`` entries except the last one,
    which also takes the remainder. With fewer entries than divisions the
    leading portions are empty.

    Raises:
        InvalidSelectionError: If divisions is less than 1.
    """
    if divisions < 1:
        raise InvalidSelectionError(f"Division count must be at least 1, got {divisions}.")
    if total < 0:
        raise ValueError(f"Roster size cannot be negative, got {total}.")

    base = total // divisions
    portions = [Portion(i * base, (i + 1) * base) for i in range(divisions - 1)]
    last_start = (divisions - 1) * base
    portions.append(Portion(last_start, last_start + base + total % divisions))
    return portions


def portion_bounds(total: int, divisions: int, index: int) -> Portion:
    """Returns the portion a single grader works on.

    Raises:
        InvalidSelectionError: If divisions < 1 or index is outside [0, divisions).
    """
    portions = compute_portions(total, divisions)
    if not 0 <= index < divisions:
        raise InvalidSelectionError(f"Portion {index} does not exist for {divisions} divisions.")
    return portions[index]


def select_portion(
    entries: Sequence[T],
    divisions: int,
    index: int,
    key: Callable[[T], str] = by_sortable_name,
) -> List[T]:
    """Sorts the roster and returns the entries of portion ``index``."""
    portion = portion_bounds(len(entries), divisions, index)
    logger.info(
        f"Selected portion {index + 1}/{divisions}: roster indices [{portion.start}, {portion.end}) of {len(entries)}."
    )
    return sort_roster(entries, key)[portion.as_slice()]
