from rich.console import Console
from rich.text import Text
from rich.panel import Panel
from ui.components import (
    ExercisePanel,
    FeedbackPanel,
    RoomPanel,
    RoomTask,
    ChecklistPanel,
    DocumentPagePanel,
    ScoreSummaryPanel,
    CertificatePanel,
    WelcomeScreen,
)
from ui.styles import (
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    create_stage_header,
)
from typing import Optional, List, Tuple, Union

from exercises import parse_letter_input
from models import ChecklistItem, Direction
from scoring import ScoreSummary

# Parsed commands returned by the input helpers
OrderingCommand = Union[Tuple[str], Tuple[str, int, Direction]]


class TrainerUI:
    """Main UI orchestrator for the practicum trainer.

    Renders state handed to it and parses keyboard input; it never grades
    answers or decides what comes next.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_welcome(
        self, practicum_title: str, question_count: int, document_count: int
    ) -> None:
        """Display the welcome screen and wait for user to press Enter."""
        welcome = WelcomeScreen(
            practicum_title=practicum_title,
            question_count=question_count,
            document_count=document_count,
        )
        self.console.print(welcome)
        self.console.print()
        self.console.input(Text("Press Enter to start...", style=f"bold {MUTED_GRAY}"))

    def show_stage_header(self, title: str) -> None:
        self.console.print()
        self.console.print(create_stage_header(title))
        self.console.print()

    def show_exercise(
        self,
        prompt_text: str,
        options: List[str],
        title: str = "Practicum",
        step_label: str = "",
        hint: Optional[str] = None,
    ) -> Union[int, str]:
        """Display a single-choice exercise and get the chosen option.

        Returns:
            "quit" if user quits, otherwise the 0-based option index.
        """
        panel = ExercisePanel(
            prompt_text=prompt_text,
            options=options,
            title=title,
            step_label=step_label,
            hint=hint,
        )
        self.console.print(panel)
        self.console.print()
        return self._get_choice_input(len(options))

    def show_ordering(
        self,
        prompt_text: str,
        items: List[str],
        hint: Optional[str] = None,
    ) -> OrderingCommand:
        """Display the working order and get one command.

        Returns:
            ("quit",), ("submit",) or ("move", index, direction) with a
            0-based index.
        """
        panel = ExercisePanel(
            prompt_text=prompt_text,
            options=items,
            title="Quiz: Workflow Order",
            input_mode="ordering",
            hint=hint,
        )
        self.console.print(panel)
        self.console.print()
        return self._get_ordering_input(len(items))

    def _get_choice_input(self, num_options: int) -> Union[int, str]:
        """Get a letter choice from the user."""
        while True:
            user_input = self.console.input(
                Text("Your answer: ", style=f"bold {MUTED_GRAY}")
            ).strip()

            if user_input.lower() == "q":
                return "quit"

            index = parse_letter_input(user_input, num_options)
            if index is not None:
                return index

            last = chr(64 + num_options)
            self.console.print(
                Text(f"Please enter A-{last} (or 'q' to quit)\n", style=ERROR_RED)
            )

    def _get_ordering_input(self, num_items: int) -> OrderingCommand:
        """Get a move / submit command for ordering exercises."""
        directions = {"u": Direction.UP, "d": Direction.DOWN}
        while True:
            user_input = self.console.input(
                Text("Command: ", style=f"bold {MUTED_GRAY}")
            ).strip().lower()

            if user_input == "q":
                return ("quit",)
            if user_input == "s":
                return ("submit",)

            parts = user_input.split()
            if len(parts) == 2 and parts[0].isdigit() and parts[1] in directions:
                number = int(parts[0])
                if 1 <= number <= num_items:
                    return ("move", number - 1, directions[parts[1]])

            self.console.print(
                Text(
                    f"Enter an item number 1-{num_items} and u/d (e.g. '3 u'), "
                    "'s' to submit or 'q' to quit\n",
                    style=ERROR_RED,
                )
            )

    def show_room(
        self,
        tasks: List[RoomTask],
        phone_answered: bool,
        show_phone_hint: bool = False,
        hints: Optional[List[str]] = None,
    ) -> str:
        """Display the room overview and return the chosen task key."""
        self.console.print(
            RoomPanel(
                tasks=tasks,
                phone_answered=phone_answered,
                show_phone_hint=show_phone_hint,
                hints=hints,
            )
        )
        self.console.print()

        valid = {task.key for task in tasks} | {"h", "q"}
        while True:
            user_input = self.console.input(
                Text("Task: ", style=f"bold {MUTED_GRAY}")
            ).strip().lower()
            if user_input in valid:
                return user_input
            self.console.print(
                Text(
                    f"Please enter one of: {', '.join(sorted(valid))}\n",
                    style=ERROR_RED,
                )
            )

    def show_checklist(
        self,
        prompt_text: str,
        items: List[ChecklistItem],
        selection: frozenset,
        required_count: int,
    ) -> Union[int, str]:
        """Display the chart list.

        Returns:
            "quit", "back", "submit" or a 0-based item index to toggle.
        """
        self.console.print(
            ChecklistPanel(prompt_text, items, selection, required_count)
        )
        self.console.print()

        commands = {"q": "quit", "b": "back", "s": "submit"}
        while True:
            user_input = self.console.input(
                Text("Chart: ", style=f"bold {MUTED_GRAY}")
            ).strip().lower()
            if user_input in commands:
                return commands[user_input]
            if user_input.isdigit() and 1 <= int(user_input) <= len(items):
                return int(user_input) - 1
            self.console.print(
                Text(
                    f"Enter a chart number 1-{len(items)}, 's', 'b' or 'q'\n",
                    style=ERROR_RED,
                )
            )

    def show_document_list(self, titles: List[str]) -> Union[int, str]:
        """Display document titles and return "back", "quit" or an index."""
        content = Text()
        for i, title in enumerate(titles):
            content.append(f"{i + 1}. ", style=f"bold {INFO_BLUE}")
            content.append(f"{title}\n")
        self.console.print(
            Panel(content, title="Document Review", border_style=INFO_BLUE)
        )
        self.console.print()

        while True:
            user_input = self.console.input(
                Text("Document: ", style=f"bold {MUTED_GRAY}")
            ).strip().lower()
            if user_input == "q":
                return "quit"
            if user_input == "b":
                return "back"
            if user_input.isdigit() and 1 <= int(user_input) <= len(titles):
                return int(user_input) - 1
            self.console.print(
                Text(f"Enter 1-{len(titles)}, 'b' or 'q'\n", style=ERROR_RED)
            )

    def show_document_page(self, panel: DocumentPagePanel) -> Union[int, str]:
        """Display a document page.

        Returns:
            "quit", "back", "next", "prev" or a 0-based option index.
        """
        self.console.print(panel)
        self.console.print()

        commands = {"q": "quit", "b": "back", "n": "next", "p": "prev"}
        while True:
            user_input = self.console.input(
                Text("Choice: ", style=f"bold {MUTED_GRAY}")
            ).strip()
            if user_input.lower() in commands:
                return commands[user_input.lower()]
            index = parse_letter_input(user_input, len(panel.options))
            if index is not None and not user_input.isdigit():
                return index
            self.console.print(
                Text("Pick a letter, 'n', 'p', 'b' or 'q'\n", style=ERROR_RED)
            )

    def show_feedback(
        self,
        is_correct: bool,
        correct_answer: Optional[str] = None,
        user_answer: str = "",
        explanation: Optional[str] = None,
    ) -> None:
        """Display feedback for the user's answer."""
        feedback = FeedbackPanel(
            is_correct=is_correct,
            correct_answer=correct_answer,
            user_answer=user_answer,
            explanation=explanation,
        )
        self.console.print(feedback)
        self.console.print()

    def show_summary(self, summary: ScoreSummary, title: str = "Score Summary") -> None:
        self.console.print(ScoreSummaryPanel(summary, title=title))
        self.console.print()

    def ask_certificate_name(self) -> str:
        """Prompt for the name printed on the certificate ('q' quits)."""
        while True:
            name = self.console.input(
                Text("Name for your certificate: ", style=f"bold {MUTED_GRAY}")
            ).strip()
            if name:
                return "quit" if name.lower() == "q" else name
            self.console.print(Text("Please enter a name\n", style=ERROR_RED))

    def show_certificate(
        self, name: str, practicum_title: str, summary: ScoreSummary
    ) -> None:
        self.console.print(CertificatePanel(name, practicum_title, summary))
        self.console.print()

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self) -> None:
        """Display the quit message."""
        self.console.print()
        self.console.print(
            Text("Goodbye! Progress is not saved between sessions.", style=MUTED_GRAY)
        )

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

    def wait_for_continue(self) -> None:
        """Wait for user to press Enter to continue."""
        self.console.input(
            Text("Press Enter to continue...", style=f"bold {MUTED_GRAY}")
        )
