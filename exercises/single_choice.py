"""Single-choice questions: pick one answer from shuffled candidates."""

from models import ExerciseOutcome, SingleChoiceExercise

from exercises.base import ExerciseHandler


class SingleChoiceHandler(ExerciseHandler[SingleChoiceExercise]):
    """Handler for single-choice questions."""

    _shuffled_choices: list[str] | None = None

    def __init__(self, exercise, randomizer=None):
        super().__init__(exercise, randomizer)
        self._shuffled_choices = None

    def get_options(self) -> list[str]:
        """Return shuffled choices for display.

        The shuffle is drawn once so the order stays put between redraws.
        """
        if self._shuffled_choices is None:
            self._shuffled_choices = self.randomizer.shuffle(self.exercise.choices)
        return list(self._shuffled_choices)

    def evaluate(self, learner_input: str) -> ExerciseOutcome:
        return self._outcome(learner_input == self.exercise.correct)
