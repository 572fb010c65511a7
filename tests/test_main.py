"""Tests for command-line parsing and session construction."""

import main
from content import save_practicum
from models import Stage


class TestParser:
    """Tests for argument parsing."""

    def test_defaults_to_interactive(self):
        args = main.create_parser().parse_args([])
        assert args.command is None
        assert args.seed is None
        assert args.content is None
        assert not args.verbose

    def test_simulate_options(self):
        args = main.create_parser().parse_args(
            ["simulate", "--runs", "3", "--slip-rate", "0.2", "--seed", "7"]
        )
        assert args.command == "simulate"
        assert args.runs == 3
        assert args.slip_rate == 0.2
        assert args.seed == 7

    def test_top_level_seed_survives_subcommand(self):
        args = main.create_parser().parse_args(["--seed", "5", "simulate"])
        assert args.seed == 5


class TestBuildSession:
    """Tests for building a session from arguments."""

    def test_seeded_sessions_match(self):
        args = main.create_parser().parse_args(["--seed", "3"])
        first = main.build_session(args)
        second = main.build_session(args)
        assert (
            first.quiz.active_question.get_options()
            == second.quiz.active_question.get_options()
        )

    def test_content_file(self, practicum, tmp_path):
        path = tmp_path / "content.json"
        practicum = practicum.model_copy(update={"title": "Custom Level"})
        save_practicum(practicum, path)

        args = main.create_parser().parse_args(["--content", str(path)])
        session = main.build_session(args)
        assert session.practicum.title == "Custom Level"
        assert session.stage == Stage.QUIZ


class TestRoomTasks:
    """Tests for the room overview rows."""

    def test_tasks_locked_before_call(self, session):
        quiz = session.quiz
        while quiz.active_question is not None:
            handler = quiz.active_question
            session.submit_single_choice(handler.exercise_id, handler.exercise.correct)
        ordering = quiz.ordering
        for target, item in enumerate(ordering.exercise.correct_sequence):
            index = ordering.working_sequence.index(item)
            while index > target:
                session.move_ordering_item(ordering.exercise_id, index, "up")
                index -= 1
        session.submit_ordering(ordering.exercise_id)

        tasks = main.room_tasks(session.room)
        assert [task.key for task in tasks] == ["1", "2", "3", "4"]
        assert not tasks[0].locked
        assert all(task.locked for task in tasks[1:])
