"""Abstract base class and shared utilities for exercise handlers."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from models import Exercise, ExerciseOutcome
from randomizer import Randomizer

E = TypeVar("E", bound=Exercise)


class ExerciseHandler(ABC, Generic[E]):
    """Abstract base class for exercise handlers.

    A handler wraps one exercise instance and provides:
    - Answer checking (`evaluate`), which is pure: the same input always
      grades the same way, whatever was shown to the learner
    - Presentation state (shuffled options, working order, selection),
      drawn lazily from the injected Randomizer and stable afterwards

    To create a new exercise kind:
    1. Create a Pydantic model in models.py extending Exercise
    2. Create a handler class extending ExerciseHandler[YourExerciseModel]
    3. Implement all abstract methods
    4. Register it in EXERCISE_HANDLERS in exercises/__init__.py
    """

    def __init__(self, exercise: E, randomizer: Randomizer | None = None):
        """Initialize handler with an exercise instance."""
        self.exercise = exercise
        self.randomizer = randomizer or Randomizer()

    @property
    def exercise_id(self) -> str:
        return self.exercise.id

    def get_prompt_text(self) -> str:
        """Return the main prompt text."""
        return self.exercise.prompt

    @abstractmethod
    def get_options(self) -> list[str]:
        """Return option labels in presentation order."""
        ...

    @abstractmethod
    def evaluate(self, learner_input: Any) -> ExerciseOutcome:
        """Grade learner input against the exercise.

        Args:
            learner_input: Answer in the shape the exercise kind expects.

        Returns:
            The outcome; never displays or prompts.
        """
        ...

    def _outcome(self, passed: bool) -> ExerciseOutcome:
        return ExerciseOutcome(exercise_id=self.exercise.id, passed=passed)


def parse_letter_input(user_input: str, max_options: int = 4) -> int | None:
    """Parse letter (A, B, C, ...) or number (1, 2, 3, ...) input to 0-based index.

    Args:
        user_input: Raw user input string.
        max_options: Maximum number of valid options.

    Returns:
        0-based index or None if input is invalid or out of bounds.
    """
    user_input = user_input.strip().upper()

    if len(user_input) == 1 and "A" <= user_input <= "Z":
        index = ord(user_input) - ord("A")
    elif user_input.isdigit():
        index = int(user_input) - 1
    else:
        return None

    if index < 0 or index >= max_options:
        return None

    return index
