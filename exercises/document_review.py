"""Find-the-issue document review, graded one page at a time.

Each page is shown with three options: "No issues on this page", the page's
real issue (or a second distractor when the page is clean) and a distractor
drawn from the shared pool. Correctness never depends on how the options
were shuffled; see `correct_option_for`.
"""

from models import NO_ISSUES, DocumentPage, ExerciseOutcome, PageOption, PageReviewExercise

from exercises.base import ExerciseHandler


def correct_option_for(page: DocumentPage) -> str:
    """Return the option value that passes for `page`."""
    if page.issue is not None:
        return page.issue.label
    return NO_ISSUES


class PageReviewHandler(ExerciseHandler[PageReviewExercise]):
    """Handler for a single document page judgment."""

    _options: list[PageOption] | None = None

    def __init__(self, exercise, randomizer=None):
        super().__init__(exercise, randomizer)
        self._options = None

    def get_page_options(self) -> list[PageOption]:
        """Return the page's options, drawn once and stable afterwards."""
        if self._options is None:
            page = self.exercise.page
            labels = [NO_ISSUES]
            if page.issue is not None:
                labels.append(page.issue.label)
            labels.extend(
                self.randomizer.sample(
                    self.exercise.available_distractors, page.distractors_needed
                )
            )
            self._options = self.randomizer.shuffle(
                [PageOption(label=label, value=label) for label in labels]
            )
        return list(self._options)

    def get_options(self) -> list[str]:
        return [option.label for option in self.get_page_options()]

    def is_presented(self, value: str) -> bool:
        return any(option.value == value for option in self.get_page_options())

    def evaluate(self, learner_input: str) -> ExerciseOutcome:
        return self._outcome(learner_input == correct_option_for(self.exercise.page))
