import argparse
import logging
import random
import signal
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError
from rich.console import Console

from content import build_default_practicum, load_practicum
from errors import (
    IneligibleExercise,
    InvalidSelectionCount,
    RetryRequired,
    UnsatisfiableConfiguration,
)
from models import Practicum, Stage, page_key
from randomizer import Randomizer
from room import Room, RoomSignal
from session import TrainingSession
from ui import TrainerUI, RoomTask, DocumentPagePanel
from ui.styles import DEFAULT_THEME

# Menu turns in the room before a deferred hint signal is delivered
PHONE_HINT_TURNS = 2
TASK_HINT_TURNS = 3

TASK_HINTS = [
    "Coding binder: established patients use 9921x codes, new patients 9920x.",
    "Chart audit: look for a missing signature and a DOB mismatch.",
    "Documents: check headers, signatures and authorizations page by page.",
]


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog; warnings only unless verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Medical Office Practicum Trainer")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible option order",
    )
    parser.add_argument(
        "--content",
        "-c",
        type=str,
        default=None,
        help="Practicum content JSON file (default: built-in Doctor's Office)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Simulate subcommand
    sim_parser = subparsers.add_parser("simulate", help="Run learner simulation")
    sim_parser.add_argument(
        "--runs",
        "-n",
        type=int,
        default=10,
        help="Number of sessions to simulate (default: 10)",
    )
    sim_parser.add_argument(
        "--slip-rate",
        "-s",
        type=float,
        default=0.15,
        help="Probability of a wrong pick per action 0.0-0.9 (default: 0.15)",
    )
    sim_parser.add_argument(
        "--name",
        type=str,
        default="Simulated Learner",
        help="Name typed on the certificate",
    )
    sim_parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="simulation_results.json",
        help="Output JSON file path (default: simulation_results.json)",
    )
    sim_parser.add_argument(
        "--print-runs",
        action="store_true",
        help="Print stage-by-stage output",
    )
    sim_parser.add_argument(
        "--seed",
        type=int,
        default=argparse.SUPPRESS,
        help="Random seed for reproducibility",
    )

    return parser


def load_content(path: str | None) -> Practicum:
    """Load practicum content from `path`, or the built-in level."""
    if path is None:
        return build_default_practicum()
    return load_practicum(Path(path))


def build_session(args) -> TrainingSession:
    """Create a session from parsed command-line arguments."""
    practicum = load_content(args.content)
    randomizer = Randomizer(random.Random(args.seed)) if args.seed is not None else None
    return TrainingSession(practicum, randomizer=randomizer)


def create_sigint_handler(ui: TrainerUI):
    """Create a SIGINT handler that exits cleanly."""

    def sigint_handler(signum, frame):
        ui.show_quit_message()
        sys.exit(0)

    return sigint_handler


# --- Stage 1: Quiz ---------------------------------------------------------


def run_quiz(session: TrainingSession, ui: TrainerUI) -> bool:
    """Run the quiz; returns False if the user quit."""
    quiz = session.quiz
    ui.show_stage_header("Stage 1: Knowledge Check")

    total = len(quiz.question_handlers)
    while quiz.active_question is not None:
        handler = quiz.active_question
        options = handler.get_options()
        choice = ui.show_exercise(
            handler.get_prompt_text(),
            options,
            title="Quiz",
            step_label=f"Question {quiz.step + 1}/{total}",
        )
        if choice == "quit":
            return False

        outcome = session.submit_single_choice(handler.exercise_id, options[choice])
        ui.show_feedback(outcome.passed, handler.exercise.correct, options[choice])

    ordering = quiz.ordering
    hint = None
    while session.stage == Stage.QUIZ:
        command = ui.show_ordering(ordering.get_prompt_text(), ordering.get_options(), hint)
        if command[0] == "quit":
            return False
        if command[0] == "move":
            _, index, direction = command
            session.move_ordering_item(ordering.exercise_id, index, direction)
            continue

        outcome = session.submit_ordering(ordering.exercise_id)
        if outcome.passed:
            ui.show_feedback(True)
        else:
            hint = ordering.exercise.metadata.get("hint")
            ui.show_feedback(False, explanation="Keep rearranging the steps.")

    ui.show_summary(session.stage_summaries[Stage.QUIZ], title="Quiz Complete")
    return True


# --- Stage 2: Doctor's Office ---------------------------------------------


def room_tasks(room: Room) -> list[RoomTask]:
    locked = not room.tasks_unlocked
    audit = room.audit
    return [
        RoomTask(
            "1",
            "Answer the phone call",
            room.phone_call.is_done,
            False,
            f"step {min(room.phone_call.active_index + 1, len(room.phone_call.handlers))}"
            f"/{len(room.phone_call.handlers)}",
        ),
        RoomTask(
            "2",
            "Coding binder",
            room.binder.is_done,
            locked,
            f"{room.binder.correct_count}/{len(room.binder.handlers)} correct",
        ),
        RoomTask(
            "3",
            "Chart audit",
            audit.multi_select_passed,
            locked,
            f"select {audit.config.required_selection}",
        ),
        RoomTask(
            "4",
            "Document review",
            audit.pages_correct >= audit.config.required_correct_pages,
            locked,
            f"{audit.pages_correct}/{audit.config.required_correct_pages} pages",
        ),
    ]


def run_phone_call(session: TrainingSession, room: Room, ui: TrainerUI) -> bool:
    session.answer_phone()
    call = room.phone_call
    while not call.is_done:
        handler = call.active_handler
        options = handler.get_options()
        choice = ui.show_exercise(
            handler.get_prompt_text(),
            options,
            title="Phone Call",
            step_label=f"Step {call.active_index + 1}/{len(call.handlers)}",
        )
        if choice == "quit":
            return False
        try:
            session.submit_single_choice(handler.exercise_id, options[choice])
            ui.show_feedback(True)
        except RetryRequired:
            ui.show_feedback(False, user_answer=options[choice], explanation="Try again.")
    ui.show_success("Call complete. The desk tasks are unlocked.")
    return True


def run_binder(session: TrainingSession, room: Room, ui: TrainerUI) -> bool:
    cases = room.binder.cases()
    for number, handler in enumerate(cases, start=1):
        outcome = room.binder.outcomes.get(handler.exercise_id)
        if outcome is not None and outcome.passed:
            continue
        options = handler.get_options()
        choice = ui.show_exercise(
            handler.get_prompt_text(),
            options,
            title="Coding Binder",
            step_label=f"Case {handler.exercise_id} ({number}/{len(cases)})",
        )
        if choice == "quit":
            return False
        outcome = session.submit_single_choice(handler.exercise_id, options[choice])
        ui.show_feedback(outcome.passed, user_answer=options[choice])
        if session.stage != Stage.ROOM:
            break
    return True


def run_chart_audit(session: TrainingSession, room: Room, ui: TrainerUI) -> bool:
    audit = room.audit
    if audit.multi_select_passed:
        ui.show_info("Chart audit already complete.")
        return True

    checklist = audit.checklist
    items = checklist.get_items()
    while session.stage == Stage.ROOM:
        command = ui.show_checklist(
            checklist.get_prompt_text(),
            items,
            checklist.selection,
            checklist.exercise.required_count,
        )
        if command == "quit":
            return False
        if command == "back":
            return True
        if command != "submit":
            session.toggle_multi_select(checklist.exercise_id, items[command].id)
            continue

        try:
            outcome = session.submit_multi_select(checklist.exercise_id)
        except InvalidSelectionCount as exc:
            ui.show_error(f"Select exactly {exc.required} charts (you selected {exc.actual}).")
            continue
        ui.show_feedback(outcome.passed)
        if outcome.passed:
            return True
    return True


def run_documents(session: TrainingSession, room: Room, ui: TrainerUI) -> bool:
    documents = session.practicum.documents
    audit = room.audit
    while session.stage == Stage.ROOM:
        ui.show_info(
            f"Pages judged correctly: {audit.pages_correct}"
            f"/{audit.config.required_correct_pages}"
        )
        choice = ui.show_document_list([document.title for document in documents])
        if choice == "quit":
            return False
        if choice == "back":
            return True

        document = session.open_document(documents[choice].id)
        page_index = 0
        while session.stage == Stage.ROOM:
            page = document.pages[page_index]
            options = session.page_options(document.id, page.id)
            selected = audit.page_selections.get(page_key(document.id, page.id))
            panel = DocumentPagePanel(
                document.title,
                page.title,
                page.body,
                [option.label for option in options],
                page_number=page_index + 1,
                page_count=len(document.pages),
                current_selection=selected,
            )
            command = ui.show_document_page(panel)
            if command == "quit":
                return False
            if command == "back":
                break
            if command == "next":
                page_index = min(page_index + 1, len(document.pages) - 1)
            elif command == "prev":
                page_index = max(page_index - 1, 0)
            else:
                value = options[command].value
                outcome = session.select_document_page_option(document.id, page.id, value)
                ui.show_feedback(outcome.passed, user_answer=options[command].label)
    return True


def run_room(session: TrainingSession, ui: TrainerUI) -> bool:
    """Run the doctor's office until every task is done."""
    room = session.room
    ui.show_stage_header("Stage 2: Doctor's Office")

    turns = 0
    unlocked_turns = 0
    while session.stage == Stage.ROOM:
        turns += 1
        if turns > PHONE_HINT_TURNS:
            session.receive_signal(RoomSignal.PHONE_HINT_DUE)
        if room.tasks_unlocked:
            unlocked_turns += 1
            if unlocked_turns > TASK_HINT_TURNS:
                session.receive_signal(RoomSignal.TASK_HINT_DUE)

        tasks = room_tasks(room)
        key = ui.show_room(
            tasks,
            room.phone_answered,
            room.show_phone_hint,
            TASK_HINTS if room.show_task_hints else None,
        )
        if key == "q":
            return False
        if key == "h":
            room.toggle_hints()
            continue
        if key != "1" and not room.tasks_unlocked:
            ui.show_info("Finish the phone call first.")
            continue

        runners = {
            "1": run_phone_call,
            "2": run_binder,
            "3": run_chart_audit,
            "4": run_documents,
        }
        try:
            if not runners[key](session, room, ui):
                return False
        except IneligibleExercise as exc:
            ui.show_error(str(exc))

    ui.show_summary(session.stage_summaries[Stage.ROOM], title="Office Tasks Complete")
    return True


# --- Stage 3: Certificate --------------------------------------------------


def run_certificate(session: TrainingSession, ui: TrainerUI) -> bool:
    ui.show_stage_header("Stage 3: Certificate")
    while session.stage == Stage.CERTIFICATE:
        name = ui.ask_certificate_name()
        if name == "quit":
            return False
        try:
            session.submit_certificate_name(name)
        except ValueError as exc:
            ui.show_error(str(exc))

    ui.show_certificate(session.certificate_name, session.practicum.title, session.summary)
    return True


def run_simulation(args) -> None:
    """Run the simulation subcommand."""
    from simulate import run_simulation_and_report
    from simulator_models import SimulatedLearnerConfig

    config = SimulatedLearnerConfig(slip_rate=args.slip_rate, name=args.name)
    practicum = load_content(args.content)

    console = Console()

    console.print("=" * 40, style="bold blue")
    console.print("    Learner Simulator", style="bold blue")
    console.print("=" * 40, style="bold blue")
    console.print()

    console.print(f"Simulating {args.runs} sessions at slip rate {args.slip_rate:.2f}...")
    if args.seed is not None:
        console.print(f"Random seed: {args.seed}")
    console.print()

    run_simulation_and_report(
        config=config,
        runs=args.runs,
        output_path=Path(args.output),
        verbose=args.print_runs,
        seed=args.seed,
        practicum=practicum,
        console=console,
    )


def run_interactive(args) -> None:
    """Run the interactive practicum session."""
    console = Console(theme=DEFAULT_THEME)
    ui = TrainerUI(console)

    ui.clear_screen()

    try:
        session = build_session(args)
    except (OSError, ValidationError, UnsatisfiableConfiguration) as exc:
        ui.show_error(f"Could not load practicum content: {exc}")
        return

    signal.signal(signal.SIGINT, create_sigint_handler(ui))

    ui.show_welcome(
        practicum_title=session.practicum.title,
        question_count=len(session.practicum.quiz_questions),
        document_count=len(session.practicum.documents),
    )

    for stage_runner in (run_quiz, run_room, run_certificate):
        if not stage_runner(session, ui):
            ui.show_quit_message()
            return


def main():
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args()

    configure_logging(args.verbose)

    if args.command == "simulate":
        run_simulation(args)
    else:
        # Default to interactive mode
        run_interactive(args)


if __name__ == "__main__":
    main()
