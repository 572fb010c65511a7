"""Step ordering: rearrange items with adjacent swaps until they match."""

from typing import Sequence

from models import Direction, ExerciseOutcome, OrderingExercise

from exercises.base import ExerciseHandler


class OrderingHandler(ExerciseHandler[OrderingExercise]):
    """Handler for ordering tasks.

    The working sequence starts in a random order that is never the correct
    one (whenever more than one item exists) and only changes through
    move-up / move-down swaps.
    """

    _working: list[str] | None = None

    def __init__(self, exercise, randomizer=None):
        super().__init__(exercise, randomizer)
        self._working = None

    @property
    def working_sequence(self) -> list[str]:
        if self._working is None:
            self._working = self.randomizer.shuffle_away_from(
                self.exercise.correct_sequence
            )
        return self._working

    def get_options(self) -> list[str]:
        return list(self.working_sequence)

    def move(self, index: int, direction: Direction | str) -> list[str]:
        """Swap the item at `index` with its neighbor above or below.

        Moving the first item up or the last item down leaves the sequence
        unchanged.

        Returns:
            A copy of the updated working sequence.

        Raises:
            IndexError: If `index` is outside the sequence.
        """
        direction = Direction(direction)
        working = self.working_sequence
        if not 0 <= index < len(working):
            raise IndexError(
                f"Item index {index} out of range for {len(working)} items"
            )

        target = index - 1 if direction == Direction.UP else index + 1
        if 0 <= target < len(working):
            working[index], working[target] = working[target], working[index]
        return list(working)

    @property
    def is_solved(self) -> bool:
        return self.working_sequence == self.exercise.correct_sequence

    def evaluate(self, learner_input: Sequence[str]) -> ExerciseOutcome:
        return self._outcome(list(learner_input) == self.exercise.correct_sequence)

    def submit(self) -> ExerciseOutcome:
        """Grade the current working sequence."""
        return self.evaluate(self.working_sequence)
