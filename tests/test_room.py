"""Tests for the doctor's office room gate and its signals."""

import pytest

from errors import IneligibleExercise, RetryRequired
from exercises import correct_option_for
from room import CHART_AUDIT_ID, Room, RoomSignal


@pytest.fixture
def room(practicum, randomizer) -> Room:
    return Room(practicum, randomizer=randomizer)


def finish_call(room: Room) -> None:
    room.answer_phone()
    while not room.phone_call.is_done:
        handler = room.phone_call.active_handler
        room.submit_single_choice(handler.exercise_id, handler.exercise.correct)


def finish_binder(room: Room) -> None:
    for handler in room.binder.cases():
        room.submit_single_choice(handler.exercise_id, handler.exercise.correct)


def finish_audit(room: Room, practicum) -> None:
    for item_id in room.audit.checklist.exercise.defective_ids:
        room.toggle_multi_select(CHART_AUDIT_ID, item_id)
    room.submit_multi_select(CHART_AUDIT_ID)
    for document in practicum.documents[:2]:
        room.open_document(document.id)
        for page in document.pages:
            room.select_document_page_option(document.id, page.id, correct_option_for(page))


class TestRoomGate:
    """Tests for the room-level unlock and completion rules."""

    def test_call_requires_answered_phone(self, room):
        with pytest.raises(IneligibleExercise):
            room.submit_single_choice("call-1", "anything")

    def test_tasks_locked_until_call_done(self, room):
        room.answer_phone()
        assert not room.tasks_unlocked
        with pytest.raises(IneligibleExercise):
            room.submit_single_choice("A1", "99213 + I10")
        with pytest.raises(IneligibleExercise):
            room.toggle_multi_select(CHART_AUDIT_ID, "3")
        with pytest.raises(IneligibleExercise):
            room.open_document("D1")

    def test_wrong_call_answer_requires_retry(self, room):
        room.answer_phone()
        with pytest.raises(RetryRequired):
            room.submit_single_choice("call-1", "Put caller on hold immediately.")
        assert room.phone_call.active_index == 0

    def test_done_after_all_composites(self, room, practicum):
        finish_call(room)
        assert room.tasks_unlocked
        assert not room.is_done

        finish_binder(room)
        assert not room.is_done

        finish_audit(room, practicum)
        assert room.is_done

    def test_binder_and_audit_in_either_order(self, room, practicum):
        finish_call(room)
        finish_audit(room, practicum)
        assert not room.is_done
        finish_binder(room)
        assert room.is_done

    def test_gate_stays_done_on_later_submissions(self, room, practicum):
        finish_call(room)
        finish_binder(room)
        finish_audit(room, practicum)

        handler = room.binder.cases()[0]
        wrong = next(c for c in handler.exercise.choices if c != handler.exercise.correct)
        assert not room.submit_single_choice(handler.exercise_id, wrong).passed
        assert room.is_done
        assert room.binder.is_done

    def test_unknown_single_choice_exercise(self, room):
        finish_call(room)
        with pytest.raises(IneligibleExercise):
            room.submit_single_choice("quiz-q1", "anything")

    def test_unknown_multi_select_task(self, room):
        finish_call(room)
        with pytest.raises(IneligibleExercise):
            room.toggle_multi_select("other-audit", "3")


class TestRoomSignals:
    """Tests for deferred hint signals."""

    def test_phone_hint_before_answer(self, room):
        assert room.receive_signal(RoomSignal.PHONE_HINT_DUE)
        assert room.show_phone_hint

    def test_phone_hint_ignored_after_answer(self, room):
        room.answer_phone()
        assert not room.receive_signal("phone_hint_due")
        assert not room.show_phone_hint

    def test_answering_clears_phone_hint(self, room):
        room.receive_signal(RoomSignal.PHONE_HINT_DUE)
        room.answer_phone()
        assert not room.show_phone_hint

    def test_signal_applies_once(self, room):
        assert room.receive_signal(RoomSignal.PHONE_HINT_DUE)
        assert not room.receive_signal(RoomSignal.PHONE_HINT_DUE)

    def test_task_hint_requires_unlocked_tasks(self, room):
        assert not room.receive_signal(RoomSignal.TASK_HINT_DUE)
        finish_call(room)
        assert room.receive_signal(RoomSignal.TASK_HINT_DUE)
        assert room.show_task_hints

    def test_task_hint_ignored_once_tasks_done(self, room, practicum):
        finish_call(room)
        finish_binder(room)
        finish_audit(room, practicum)
        assert not room.receive_signal(RoomSignal.TASK_HINT_DUE)

    def test_toggle_hints(self, room):
        assert room.toggle_hints()
        assert not room.toggle_hints()

    def test_unknown_signal(self, room):
        with pytest.raises(ValueError):
            room.receive_signal("coffee_break")
