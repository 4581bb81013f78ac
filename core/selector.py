"""Choosing which submissions of a portion get processed."""

from typing import Callable, Iterator, List, Optional, Sequence

from core.models import UserSubmission
from utils.error_handler import InvalidSelectionError
from utils.logger import get_logger

logger = get_logger()

# Multi-select prompt: (labels, defaults) -> chosen indices
ChooseFunc = Callable[[List[str], List[bool]], List[int]]


class SubmissionSlots:
    """Fixed slots over a portion; each entry can be taken out exactly once."""

    def __init__(self, entries: Sequence[UserSubmission]):
        self._slots: List[Optional[UserSubmission]] = list(entries)

    def __len__(self) -> int:
        return len(self._slots)

    def labels(self) -> List[str]:
        return [entry.sortable_name if entry else '(taken)' for entry in self._slots]

    def remaining(self) -> int:
        return sum(1 for entry in self._slots if entry is not None)

    def take(self, index: int) -> UserSubmission:
        """Removes and returns the entry at ``index``, leaving the slot empty.

        Raises:
            InvalidSelectionError: If the index is out of range or the slot was already taken.
        """
        if not 0 <= index < len(self._slots):
            raise InvalidSelectionError(f"Selection {index} is out of range (0-{len(self._slots) - 1}).")
        entry = self._slots[index]
        if entry is None:
            raise InvalidSelectionError(f"Selection {index} was already processed.")
        self._slots[index] = None
        return entry


class SubmissionSelector:
    """Asks the grader which entries of a portion to process.

    Every entry starts out selected; the grader deselects the ones to skip.
    """

    def __init__(self, entries: Sequence[UserSubmission], choose: ChooseFunc):
        self.slots = SubmissionSlots(entries)
        self._choose = choose

    def select(self) -> List[int]:
        """Prompts for the selection and returns the chosen indices in roster order."""
        labels = self.slots.labels()
        chosen = sorted(self._choose(labels, [True] * len(labels)))
        logger.info(f"Grader selected {len(chosen)} of {len(labels)} submissions.")
        return chosen

    def iter_selected(self, indices: Sequence[int]) -> Iterator[UserSubmission]:
        """Yields the entries at ``indices``, consuming each slot as it is reached."""
        for index in indices:
            yield self.slots.take(index)
