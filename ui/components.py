from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.columns import Columns
from rich import box
from typing import Optional, List, Literal, NamedTuple

from models import NO_ISSUES, ChecklistItem, Stage
from scoring import ScoreSummary
from ui.styles import (
    CLINIC_TEAL,
    CLINIC_NAVY,
    WARNING_AMBER,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    get_status_style,
    get_accuracy_style,
)


class ExercisePanel:
    """A styled panel for a single-choice or ordering exercise."""

    def __init__(
        self,
        prompt_text: str,
        options: List[str],
        title: str = "Practicum",
        step_label: str = "",
        input_mode: Literal["choice", "ordering"] = "choice",
        hint: Optional[str] = None,
    ):
        self.prompt_text = prompt_text
        self.options = options
        self.title = title
        self.step_label = step_label
        self.input_mode = input_mode
        self.hint = hint

    def render(self) -> Panel:
        content = Text()

        if self.step_label:
            content.append(f"{self.step_label}\n", Style(color=MUTED_GRAY))

        content.append(self.prompt_text, Style(color=CLINIC_TEAL, bold=True))
        content.append("\n\n")

        for i, option in enumerate(self.options):
            if self.input_mode == "ordering":
                label = str(i + 1)
            else:
                label = chr(65 + i)
            content.append(f"{label}. ", Style(color=WARNING_AMBER, bold=True))
            content.append(option, Style(color=TEXT_WHITE))
            content.append("\n")

        if self.hint:
            content.append("\n")
            content.append("Hint: ", Style(color=INFO_BLUE, bold=True))
            content.append(self.hint, Style(color=INFO_BLUE))

        if self.input_mode == "ordering":
            subtitle = "'3 u' / '3 d' moves item 3, 's' submits, 'q' quits"
        else:
            last = chr(64 + len(self.options)) if self.options else "A"
            subtitle = f"Type A-{last} (or 'q' to quit)"

        return Panel(
            Align.left(content),
            title=self.title,
            subtitle=subtitle,
            border_style=CLINIC_TEAL,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for displaying exercise feedback."""

    def __init__(
        self,
        is_correct: bool,
        correct_answer: Optional[str] = None,
        user_answer: str = "",
        explanation: Optional[str] = None,
    ):
        self.is_correct = is_correct
        self.correct_answer = correct_answer
        self.user_answer = user_answer
        self.explanation = explanation

    def render(self) -> Panel:
        content = Text()

        if self.is_correct:
            content.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
            content.append("Correct!\n", Style(color=SUCCESS_GREEN, bold=True))
        else:
            content.append("✗ ", Style(color=ERROR_RED, bold=True))
            content.append("Not quite!\n", Style(color=ERROR_RED, bold=True))
            if self.user_answer:
                content.append(
                    f"You answered: {self.user_answer}\n", Style(color=MUTED_GRAY)
                )

        if self.correct_answer:
            content.append("\n")
            content.append("Correct answer: ", Style(color=MUTED_GRAY))
            content.append(self.correct_answer, Style(color=SUCCESS_GREEN, bold=True))

        if self.explanation:
            content.append("\n\n")
            content.append(self.explanation, Style(color=TEXT_WHITE))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=SUCCESS_GREEN if self.is_correct else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class RoomTask(NamedTuple):
    """One row of the room overview."""

    key: str
    label: str
    done: bool
    locked: bool
    detail: str = ""


class RoomPanel:
    """Overview of the room: the phone and the tasks on the desk."""

    def __init__(
        self,
        tasks: List[RoomTask],
        phone_answered: bool,
        show_phone_hint: bool = False,
        hints: Optional[List[str]] = None,
    ):
        self.tasks = tasks
        self.phone_answered = phone_answered
        self.show_phone_hint = show_phone_hint
        self.hints = hints or []

    def render(self) -> Panel:
        header = Text()
        if self.phone_answered:
            header.append("☎ Phone answered\n", Style(color=MUTED_GRAY))
        else:
            header.append("☎ The phone is ringing!\n", Style(color=WARNING_AMBER, bold=True))
            if self.show_phone_hint:
                header.append(
                    "Hint: answer the phone to start the call.\n", Style(color=INFO_BLUE)
                )

        table = Table(show_header=False, box=box.SIMPLE, border_style=MUTED_GRAY)
        table.add_column("Key", style=Style(color=WARNING_AMBER, bold=True))
        table.add_column("Task")
        table.add_column("Status", justify="center")
        table.add_column("Detail", style=Style(color=MUTED_GRAY))

        for task in self.tasks:
            if task.locked:
                status = "locked"
            elif task.done:
                status = "done"
            else:
                status = "open"
            table.add_row(
                f"[{task.key}]",
                Text(task.label, style=get_status_style(task.done, task.locked)),
                Text(status, style=get_status_style(task.done, task.locked)),
                task.detail,
            )

        parts = [header, table]
        if self.hints:
            hint_text = Text()
            for hint in self.hints:
                hint_text.append(f"• {hint}\n", Style(color=INFO_BLUE))
            parts.append(hint_text)

        content = Table.grid()
        for part in parts:
            content.add_row(part)

        return Panel(
            content,
            title="Doctor's Office",
            subtitle="Choose a task (or 'q' to quit)",
            border_style=CLINIC_NAVY,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ChecklistPanel:
    """Chart list for the exact multi-select audit."""

    def __init__(
        self,
        prompt_text: str,
        items: List[ChecklistItem],
        selection: frozenset,
        required_count: int,
    ):
        self.prompt_text = prompt_text
        self.items = items
        self.selection = selection
        self.required_count = required_count

    def render(self) -> Panel:
        content = Text()
        content.append(self.prompt_text, Style(color=CLINIC_TEAL, bold=True))
        content.append("\n\n")

        for i, item in enumerate(self.items):
            checked = item.id in self.selection
            content.append(f"{i + 1:>2}. ", Style(color=WARNING_AMBER, bold=True))
            content.append("[x] " if checked else "[ ] ", Style(color=TEXT_WHITE))
            content.append(
                item.label,
                Style(color=SUCCESS_GREEN, bold=True) if checked else Style(color=TEXT_WHITE),
            )
            content.append("\n")

        content.append("\n")
        content.append(
            f"Selected {len(self.selection)} of {self.required_count}",
            Style(color=MUTED_GRAY),
        )

        return Panel(
            Align.left(content),
            title="Chart Audit",
            subtitle="Number toggles a chart, 's' submits, 'b' goes back",
            border_style=CLINIC_TEAL,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class DocumentPagePanel:
    """One document page with its issue options."""

    def __init__(
        self,
        document_title: str,
        page_title: str,
        body: str,
        options: List[str],
        page_number: int = 1,
        page_count: int = 1,
        current_selection: Optional[str] = None,
    ):
        self.document_title = document_title
        self.page_title = page_title
        self.body = body
        self.options = options
        self.page_number = page_number
        self.page_count = page_count
        self.current_selection = current_selection

    def render(self) -> Panel:
        content = Text()
        content.append(
            f"Page {self.page_number}/{self.page_count}: {self.page_title}\n\n",
            Style(color=CLINIC_TEAL, bold=True),
        )
        content.append(self.body, Style(color=TEXT_WHITE))
        content.append("\n\n")
        content.append("What issue does this page have?\n", Style(color=MUTED_GRAY))

        for i, option in enumerate(self.options):
            style = Style(color=TEXT_WHITE)
            if option == self.current_selection:
                style = Style(color=SUCCESS_GREEN, bold=True)
            elif option == NO_ISSUES:
                style = Style(color=INFO_BLUE)
            content.append(f"{chr(65 + i)}. ", Style(color=WARNING_AMBER, bold=True))
            content.append(option, style)
            content.append("\n")

        return Panel(
            Align.left(content),
            title=self.document_title,
            subtitle="Letter picks an issue, 'n'/'p' pages, 'b' goes back",
            border_style=CLINIC_NAVY,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ScoreSummaryPanel:
    """Per-stage attempts and accuracy."""

    STAGE_LABELS = {
        Stage.QUIZ: "Quiz",
        Stage.ROOM: "Doctor's Office",
        Stage.CERTIFICATE: "Certificate",
    }

    def __init__(self, summary: ScoreSummary, title: str = "Score Summary"):
        self.summary = summary
        self.title = title

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=CLINIC_TEAL, bold=True),
            border_style=MUTED_GRAY,
            box=box.HEAVY,
        )
        table.add_column("Stage")
        table.add_column("Attempts", justify="right")
        table.add_column("Correct", justify="right")

        for stage, tally in self.summary.stages.items():
            table.add_row(
                self.STAGE_LABELS.get(stage, stage.value),
                str(tally.attempts),
                Text(str(tally.correct), style=Style(color=SUCCESS_GREEN)),
            )

        stats = Text()
        stats.append("Quiz score: ", Style(color=MUTED_GRAY))
        stats.append(
            f"{self.summary.quiz_points}/{self.summary.quiz_max}\n",
            Style(color=WARNING_AMBER, bold=True),
        )
        stats.append("Accuracy:   ", Style(color=MUTED_GRAY))
        stats.append(
            f"{self.summary.accuracy * 100:.0f}%",
            get_accuracy_style(self.summary.accuracy),
        )

        return Panel(
            Columns([Align.center(table), Align.center(stats)], padding=(0, 3)),
            title=self.title,
            border_style=WARNING_AMBER,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class CertificatePanel:
    """Completion certificate."""

    def __init__(self, name: str, practicum_title: str, summary: ScoreSummary):
        self.name = name
        self.practicum_title = practicum_title
        self.summary = summary

    def render(self) -> Panel:
        content = Text(justify="center")
        content.append("Certificate of Completion\n\n", Style(color=CLINIC_TEAL, bold=True))
        content.append("This certifies that\n\n", Style(color=MUTED_GRAY))
        content.append(f"{self.name}\n\n", Style(color=WARNING_AMBER, bold=True))
        content.append("has completed\n", Style(color=MUTED_GRAY))
        content.append(f"{self.practicum_title}\n\n", Style(color=TEXT_WHITE, bold=True))
        content.append(
            f"Quiz score {self.summary.quiz_points}/{self.summary.quiz_max}",
            Style(color=MUTED_GRAY),
        )

        return Panel(
            Align.center(content),
            border_style=WARNING_AMBER,
            box=box.DOUBLE,
            padding=(2, 4),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen with banner and practicum info."""

    def __init__(self, practicum_title: str, question_count: int, document_count: int):
        self.practicum_title = practicum_title
        self.question_count = question_count
        self.document_count = document_count

    def render(self) -> Panel:
        banner = Text()
        banner.append(
            "╔═══════════════════════════════════════════╗\n", Style(color=CLINIC_TEAL)
        )
        banner.append(
            "║          Medical Office Practicum         ║\n",
            Style(color=CLINIC_TEAL, bold=True),
        )
        banner.append(
            "╚═══════════════════════════════════════════╝\n", Style(color=CLINIC_TEAL)
        )
        banner.append("\n")
        banner.append(f"{self.practicum_title}\n\n", Style(color=TEXT_WHITE))
        banner.append("Quiz → Doctor's Office → Certificate\n", Style(color=MUTED_GRAY))
        banner.append("Type 'q' at any time to quit.\n", Style(color=MUTED_GRAY))

        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.ROUNDED)
        stats.add_column("Label", justify="center")
        stats.add_column("Value", justify="center")
        stats.add_row(
            Text("Quiz Questions", style=Style(color=MUTED_GRAY)),
            Text(str(self.question_count), style=Style(color=WARNING_AMBER, bold=True)),
        )
        stats.add_row(
            Text("Documents", style=Style(color=MUTED_GRAY)),
            Text(str(self.document_count), style=Style(color=WARNING_AMBER, bold=True)),
        )

        return Panel(
            Columns(
                [Align.center(banner), Align.center(stats)],
                align="center",
                padding=(3, 3),
            ),
            border_style=CLINIC_TEAL,
            box=box.HEAVY,
            padding=(2, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()
