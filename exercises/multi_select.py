"""Exact multi-select: toggle items, then submit exactly the required count."""

from typing import Iterable

from errors import InvalidSelectionCount
from models import ChecklistItem, ExerciseOutcome, MultiSelectExercise

from exercises.base import ExerciseHandler


class MultiSelectHandler(ExerciseHandler[MultiSelectExercise]):
    """Handler for exact multi-select (pick exactly k defective items)."""

    _presented: list[ChecklistItem] | None = None

    def __init__(self, exercise, randomizer=None):
        super().__init__(exercise, randomizer)
        self._presented = None
        self._selection: set[str] = set()

    def get_items(self) -> list[ChecklistItem]:
        """Return the universe in shuffled presentation order."""
        if self._presented is None:
            self._presented = self.randomizer.shuffle(self.exercise.items)
        return list(self._presented)

    def get_options(self) -> list[str]:
        return [item.label for item in self.get_items()]

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._selection)

    def toggle(self, item_id: str) -> frozenset[str]:
        """Add or remove an item from the selection."""
        if self.exercise.get_item(item_id) is None:
            raise ValueError(f"Unknown item {item_id} in {self.exercise.id}")
        if item_id in self._selection:
            self._selection.remove(item_id)
        else:
            self._selection.add(item_id)
        return self.selection

    def evaluate(self, learner_input: Iterable[str]) -> ExerciseOutcome:
        selected = frozenset(learner_input)
        if len(selected) != self.exercise.required_count:
            raise InvalidSelectionCount(
                self.exercise.id, self.exercise.required_count, len(selected)
            )
        return self._outcome(selected == self.exercise.defective_ids)

    def submit(self) -> ExerciseOutcome:
        """Grade the current selection."""
        return self.evaluate(self._selection)
