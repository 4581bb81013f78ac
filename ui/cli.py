"""Command Line Interface (CLI) for user interaction."""

from typing import Callable, List, Optional, Sequence, TypeVar

from rich.console import Console
from rich.table import Table
from rich.prompt import Prompt, IntPrompt
from rich.panel import Panel
from rich.text import Text
from rich.markup import escape

from core.models import Assignment, CheckResult, Course
from utils.logger import get_logger
from utils.error_handler import UserCancelledError

logger = get_logger()
console = Console()

T = TypeVar('T') # Generic type for selection items

PASS_MARK = "[green]✔[/green]"
FAIL_MARK = "[red]✗[/red]"

def display_welcome():
    """Displays a welcome message."""
    console.print(Panel(
        "[bold green]Canvas Submission Grader[/bold green]",
        title="Welcome",
        border_style="blue"
    ))
    console.print("Downloads a portion of an assignment's submissions and walks through them one by one.")
    console.rule()

def display_farewell():
    """Displays a farewell message."""
    console.rule()
    console.print("[bold cyan]Grading session finished. Extracted submissions are left in place.[/bold cyan]")

def display_error(message: str):
    """Displays an error message in a standard format."""
    console.print(Panel(f"[bold red]Error:[/bold red] {message}", title="Error", border_style="red"))

def display_warning(message: str):
    """Displays a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")

def display_success(message: str):
    """Displays a success message."""
    console.print(f"[green]Success:[/green] {message}")

def display_step(step_number: int, description: str):
    """Displays the current step in the process."""
    console.print(f"\n[bold blue]Step {step_number}:[/bold blue] {description}")
    console.rule()

def prompt_for_selection(items: List[T], display_func: Callable[[T], str], prompt_message: str) -> Optional[T]:
    """Prompts the user to select an item from a list.

    Args:
        items: The list of items to choose from.
        display_func: A function that takes an item and returns a string representation for display.
        prompt_message: The message to display before the list.

    Returns:
        The selected item, or None if no items are available.

    Raises:
        UserCancelledError: If the user explicitly cancels (e.g., by entering 0).
    """
    if not items:
        console.print("[yellow]No items available for selection.[/yellow]")
        return None

    console.print(prompt_message)

    table = Table(title="Available Items", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Item Details", style="cyan")

    choices = []
    for i, item in enumerate(items):
        table.add_row(str(i + 1), display_func(item))
        choices.append(str(i + 1))

    console.print(table)
    console.print("Enter 0 to cancel.")

    choice = IntPrompt.ask("Select item number", choices=choices + ["0"], show_choices=False)
    if choice == 0:
        raise UserCancelledError("User cancelled selection.")
    return items[choice - 1]

def prompt_division_count(default: int = 1) -> int:
    """Asks how many graders share the assignment."""
    while True:
        count = IntPrompt.ask("Division count", default=default)
        if count >= 1:
            return count
        console.print("[prompt.invalid]Division count must be at least 1.")

def prompt_portion(division_count: int) -> int:
    """Asks which portion to grade. Shown 1-based, returned 0-based."""
    if division_count == 1:
        return 0
    choices = [str(i) for i in range(1, division_count + 1)]
    return IntPrompt.ask("Portion", choices=choices, default=1) - 1

def _parse_index(token: str, count: int) -> int:
    number = int(token)
    if not 1 <= number <= count:
        raise ValueError(f"{number} is not between 1 and {count}")
    return number - 1

def parse_index_selection(text: str, count: int) -> List[int]:
    """Parses a selection such as ``1,3,5-7``, ``all`` or ``none``.

    Numbers are 1-based as displayed; the result is 0-based, sorted and
    free of duplicates.

    Raises:
        ValueError: If a token is not a number or range within 1..count.
    """
    text = text.strip().lower()
    if text in ("all", "*"):
        return list(range(count))
    if text in ("", "none", "-"):
        return []

    selected = set()
    for token in text.replace(" ", ",").split(","):
        if not token:
            continue
        if "-" in token:
            first, _, last = token.partition("-")
            start, end = _parse_index(first, count), _parse_index(last, count)
            if start > end:
                raise ValueError(f"range {token} runs backwards")
            selected.update(range(start, end + 1))
        else:
            selected.add(_parse_index(token, count))
    return sorted(selected)

def _format_defaults(defaults: Sequence[bool]) -> str:
    if all(defaults):
        return "all"
    chosen = [str(i + 1) for i, flag in enumerate(defaults) if flag]
    return ",".join(chosen) if chosen else "none"

def prompt_multi_selection(labels: List[str], defaults: List[bool], title: str = "Users to grade") -> List[int]:
    """Lets the user pick any subset of ``labels``.

    Pressing Enter keeps the pre-selected entries. ``q`` cancels.

    Returns:
        0-based indices of the chosen entries, in list order.

    Raises:
        UserCancelledError: If the user enters ``q``.
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="cyan")
    table.add_column("Selected", justify="center")
    for i, (label, flag) in enumerate(zip(labels, defaults)):
        table.add_row(str(i + 1), escape(label), PASS_MARK if flag else "")
    console.print(table)
    console.print("Enter numbers or ranges (e.g. 1,3,5-7), 'all', 'none', or 'q' to cancel.")

    while True:
        answer = Prompt.ask(title, default=_format_defaults(defaults))
        if answer.strip().lower() == "q":
            raise UserCancelledError("User cancelled submission selection.")
        try:
            return parse_index_selection(answer, len(labels))
        except ValueError as e:
            logger.debug(f"Rejected selection input '{answer}': {e}")
            console.print(f"[prompt.invalid]Invalid selection: {e}")

def press_enter_to_continue():
    Prompt.ask("Press enter to continue", default="", show_default=False)

def display_grading_header(sortable_name: str):
    console.print(f"\nGrading [bright_blue]{escape(sortable_name)}[/bright_blue]")

def display_check_report(title: str, results: List[CheckResult]):
    """Prints one line per checked file with a pass or fail mark."""
    console.print(f"{title}:")
    if not results:
        console.print("\t[dim](no matching files)[/dim]")
    for result in results:
        console.print(f"\t{PASS_MARK if result.passed else FAIL_MARK} {escape(result.file_name)}", highlight=False)

def display_pipeline_summary(results: list):
    """Displays a summary table of processed submissions.

    Args:
        results: PipelineResult objects from the submission pipeline.
    """
    if not results:
        console.print("[yellow]No submissions were processed.[/yellow]")
        return

    table = Table(title="Submission Processing Results", show_header=True, header_style="bold magenta")
    table.add_column("Student", style="cyan")
    table.add_column("State", style="green")
    table.add_column("Errors", style="red")

    failed = 0
    for result in results:
        if result.error:
            failed += 1
            error_text = Text(f"{type(result.error).__name__}: {result.error}", style="yellow")
        else:
            error_text = Text("None", style="dim green")
        table.add_row(result.name, result.state.value, error_text)

    console.print(table)
    console.print(f"Summary: {len(results) - failed} processed successfully, {failed} failed.")

# --- Display functions for specific items ---

def format_course_for_display(course: Course) -> str:
    """Formats a course for display in selection prompts."""
    return f"{course.name} (ID: {course.id})"

def format_assignment_for_display(assignment: Assignment) -> str:
    """Formats an assignment for display in selection prompts."""
    return f"{assignment.name} (ID: {assignment.id})"
