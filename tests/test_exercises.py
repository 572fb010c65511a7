"""Unit tests for the exercise handlers."""

import pytest

from errors import InvalidSelectionCount, UnsatisfiableConfiguration
from exercises import (
    MultiSelectHandler,
    OrderingHandler,
    PageReviewHandler,
    SingleChoiceHandler,
    correct_option_for,
    evaluate,
    get_exercise_handler,
    parse_letter_input,
)
from models import (
    NO_ISSUES,
    DocumentPage,
    Exercise,
    OrderingExercise,
    PageIssue,
    PageReviewExercise,
    SingleChoiceExercise,
)


class TestSingleChoice:
    """Tests for single-choice grading."""

    def test_correct_answer_passes(self, single_choice, randomizer):
        handler = SingleChoiceHandler(single_choice, randomizer)
        outcome = handler.evaluate("Name + DOB")
        assert outcome.passed
        assert outcome.exercise_id == "sc1"

    def test_wrong_answer_fails(self, single_choice, randomizer):
        handler = SingleChoiceHandler(single_choice, randomizer)
        assert not handler.evaluate("Zip code").passed

    def test_grading_ignores_presentation_order(self, single_choice, randomizer):
        handler = SingleChoiceHandler(single_choice, randomizer)
        options = handler.get_options()
        assert sorted(options) == sorted(single_choice.choices)
        assert handler.get_options() == options
        assert handler.evaluate(single_choice.correct).passed

    def test_duplicate_choices_rejected(self):
        with pytest.raises(UnsatisfiableConfiguration):
            SingleChoiceExercise(id="x", prompt="?", choices=["a", "a"], correct="a")

    def test_correct_must_be_a_choice(self):
        with pytest.raises(UnsatisfiableConfiguration):
            SingleChoiceExercise(id="x", prompt="?", choices=["a", "b"], correct="c")


class TestOrdering:
    """Tests for ordering by adjacent swaps."""

    def test_initial_order_is_not_solved(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        assert handler.working_sequence != ordering_exercise.correct_sequence
        assert not handler.is_solved

    def test_move_up_swaps_with_previous(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        before = handler.get_options()
        after = handler.move(2, "up")
        assert after[1] == before[2]
        assert after[2] == before[1]

    def test_move_first_up_is_noop(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        before = handler.get_options()
        assert handler.move(0, "up") == before

    def test_move_last_down_is_noop(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        before = handler.get_options()
        assert handler.move(len(before) - 1, "down") == before

    def test_move_out_of_range(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        with pytest.raises(IndexError):
            handler.move(4, "down")
        with pytest.raises(IndexError):
            handler.move(-1, "up")

    def test_evaluate_exact_sequence(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        assert handler.evaluate(["verify", "authorize", "scope", "log"]).passed
        assert not handler.evaluate(["authorize", "verify", "scope", "log"]).passed

    def test_submit_after_solving(self, ordering_exercise, randomizer):
        handler = OrderingHandler(ordering_exercise, randomizer)
        correct = ordering_exercise.correct_sequence
        # Selection sort by adjacent swaps
        for target, item in enumerate(correct):
            index = handler.working_sequence.index(item)
            while index > target:
                handler.move(index, "up")
                index -= 1
        assert handler.is_solved
        assert handler.submit().passed

    def test_single_item_sequence_starts_solved(self, randomizer):
        exercise = OrderingExercise(id="one", prompt="?", correct_sequence=["only"])
        assert OrderingHandler(exercise, randomizer).submit().passed

    def test_empty_sequence_rejected(self):
        with pytest.raises(UnsatisfiableConfiguration):
            OrderingExercise(id="none", prompt="?", correct_sequence=[])


class TestMultiSelect:
    """Tests for exact multi-select."""

    def test_exact_defects_pass(self, checklist, randomizer):
        handler = MultiSelectHandler(checklist, randomizer)
        assert handler.evaluate({"c2", "c4"}).passed

    def test_wrong_pair_fails(self, checklist, randomizer):
        handler = MultiSelectHandler(checklist, randomizer)
        assert not handler.evaluate({"c1", "c4"}).passed

    @pytest.mark.parametrize("selection", [set(), {"c2"}, {"c2", "c4", "c5"}])
    def test_wrong_count_raises(self, checklist, randomizer, selection):
        handler = MultiSelectHandler(checklist, randomizer)
        with pytest.raises(InvalidSelectionCount) as exc_info:
            handler.evaluate(selection)
        assert exc_info.value.required == 2
        assert exc_info.value.actual == len(selection)

    def test_toggle_adds_and_removes(self, checklist, randomizer):
        handler = MultiSelectHandler(checklist, randomizer)
        assert handler.toggle("c2") == frozenset({"c2"})
        assert handler.toggle("c4") == frozenset({"c2", "c4"})
        assert handler.toggle("c2") == frozenset({"c4"})

    def test_toggle_unknown_item(self, checklist, randomizer):
        handler = MultiSelectHandler(checklist, randomizer)
        with pytest.raises(ValueError):
            handler.toggle("nope")

    def test_submit_uses_selection(self, checklist, randomizer):
        handler = MultiSelectHandler(checklist, randomizer)
        handler.toggle("c4")
        handler.toggle("c2")
        assert handler.submit().passed

    def test_items_are_shuffled_once(self, checklist, randomizer):
        handler = MultiSelectHandler(checklist, randomizer)
        items = handler.get_items()
        assert {item.id for item in items} == {"c1", "c2", "c3", "c4", "c5"}
        assert handler.get_items() == items

    def test_defect_count_must_match_required(self, checklist):
        data = checklist.model_dump()
        data["required_count"] = 3
        with pytest.raises(UnsatisfiableConfiguration):
            type(checklist).model_validate(data)


class TestPageReview:
    """Tests for per-page document review."""

    def _handler(self, document, page_id, pool, randomizer):
        page = document.get_page(page_id)
        exercise = PageReviewExercise.for_page(document, page, pool)
        return PageReviewHandler(exercise, randomizer)

    def test_page_with_issue_options(self, review_document, distractor_pool, randomizer):
        handler = self._handler(review_document, "p2", distractor_pool, randomizer)
        values = [option.value for option in handler.get_page_options()]

        assert len(values) == 3
        assert len(set(values)) == 3
        assert NO_ISSUES in values
        assert "Missing provider signature" in values

    def test_clean_page_options(self, review_document, distractor_pool, randomizer):
        handler = self._handler(review_document, "p1", distractor_pool, randomizer)
        values = [option.value for option in handler.get_page_options()]

        assert len(values) == 3
        assert len(set(values)) == 3
        assert NO_ISSUES in values
        assert all(v == NO_ISSUES or v in distractor_pool for v in values)

    def test_options_are_stable(self, review_document, distractor_pool, randomizer):
        handler = self._handler(review_document, "p1", distractor_pool, randomizer)
        assert handler.get_page_options() == handler.get_page_options()

    def test_grading(self, review_document, distractor_pool, randomizer):
        issue_page = self._handler(review_document, "p2", distractor_pool, randomizer)
        clean_page = self._handler(review_document, "p1", distractor_pool, randomizer)

        assert issue_page.evaluate("Missing provider signature").passed
        assert not issue_page.evaluate(NO_ISSUES).passed
        assert clean_page.evaluate(NO_ISSUES).passed
        assert not clean_page.evaluate("Wrong MRN").passed

    def test_exercise_id_is_page_key(self, review_document, distractor_pool, randomizer):
        handler = self._handler(review_document, "p2", distractor_pool, randomizer)
        assert handler.exercise_id == "DX:p2"

    def test_correct_option_for(self):
        clean = DocumentPage(id="p1", title="t")
        flawed = DocumentPage(
            id="p2", title="t", issue=PageIssue(id="i1", label="Wrong MRN")
        )
        assert correct_option_for(clean) == NO_ISSUES
        assert correct_option_for(flawed) == "Wrong MRN"

    def test_issue_label_cannot_be_no_issues(self):
        with pytest.raises(UnsatisfiableConfiguration):
            DocumentPage(id="p1", title="t", issue=PageIssue(id="i1", label=NO_ISSUES))

    def test_pool_too_small(self, review_document):
        page = review_document.get_page("p1")
        with pytest.raises(UnsatisfiableConfiguration):
            PageReviewExercise.for_page(review_document, page, ["Only one"])

    def test_pool_excludes_own_issue(self, review_document):
        page = review_document.get_page("p2")
        with pytest.raises(UnsatisfiableConfiguration):
            PageReviewExercise.for_page(
                review_document, page, ["Missing provider signature", NO_ISSUES]
            )


class TestRegistry:
    """Tests for handler lookup and the evaluate entry point."""

    def test_lookup_by_instance(self, single_choice, ordering_exercise, checklist):
        assert get_exercise_handler(single_choice) is SingleChoiceHandler
        assert get_exercise_handler(ordering_exercise) is OrderingHandler
        assert get_exercise_handler(checklist) is MultiSelectHandler

    def test_unknown_exercise_kind(self):
        with pytest.raises(TypeError):
            get_exercise_handler(Exercise(id="x", prompt="?"))

    def test_evaluate_entry_point(self, single_choice, checklist):
        assert evaluate(single_choice, "Name + DOB").passed
        assert not evaluate(checklist, ["c1", "c2"]).passed


class TestParseLetterInput:
    """Tests for letter / number parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("a", 0), ("B", 1), (" c ", 2), ("1", 0), ("3", 2), ("E", None), ("0", None), ("ab", None)],
    )
    def test_parse(self, raw, expected):
        assert parse_letter_input(raw, 4) == expected
