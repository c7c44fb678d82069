"""Console, banner, step tracker and interactive prompts shared by the CLI."""

from typing import Mapping, Protocol

import readchar
import typer
from rich.align import Align
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

console = Console()
err_console = Console(stderr=True)

# ASCII Art Banner
BANNER = """
╦╔╗╔╦╔╦╗  ╦  ╦╔╗
║║║║║ ║   ║  ║╠╩╗
╩╝╚╝╩ ╩   ╩═╝╩╚═╝
"""

TAGLINE = "npminitlib - Bootstrap a TypeScript library with a ready-made toolchain"


def show_banner():
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip().split('\n')
    colors = ["bright_blue", "blue", "cyan", "bright_cyan", "white", "bright_white"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        color = colors[i % len(colors)]
        styled_banner.append(line + "\n", style=color)

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


class StepTracker:
    """Track and render pipeline steps as a tree without emojis."""

    def __init__(self, title: str):
        self.title = title
        self.steps = []  # list of dicts: {key, label, status, detail}

    def add(self, key: str, label: str):
        if key not in [s["key"] for s in self.steps]:
            self.steps.append({"key": key, "label": label, "status": "pending", "detail": ""})

    def start(self, key: str, detail: str = ""):
        self._update(key, status="running", detail=detail)

    def complete(self, key: str, detail: str = ""):
        self._update(key, status="done", detail=detail)

    def error(self, key: str, detail: str = ""):
        self._update(key, status="error", detail=detail)

    def skip(self, key: str, detail: str = ""):
        self._update(key, status="skipped", detail=detail)

    def status(self, key: str) -> str | None:
        for s in self.steps:
            if s["key"] == key:
                return s["status"]
        return None

    def _update(self, key: str, status: str, detail: str):
        for s in self.steps:
            if s["key"] == key:
                s["status"] = status
                if detail:
                    s["detail"] = detail
                return
        # If not present, add it
        self.steps.append({"key": key, "label": key, "status": status, "detail": detail})

    def render(self):
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        for step in self.steps:
            label = step["label"]
            detail_text = step["detail"].strip() if step["detail"] else ""

            status = step["status"]
            if status == "done":
                symbol = "[green]●[/green]"
            elif status == "pending":
                symbol = "[green dim]○[/green dim]"
            elif status == "running":
                symbol = "[cyan]○[/cyan]"
            elif status == "error":
                symbol = "[red]●[/red]"
            elif status == "skipped":
                symbol = "[yellow]○[/yellow]"
            else:
                symbol = " "

            if status == "pending":
                if detail_text:
                    line = f"{symbol} [bright_black]{label} ({detail_text})[/bright_black]"
                else:
                    line = f"{symbol} [bright_black]{label}[/bright_black]"
            else:
                if detail_text:
                    line = f"{symbol} [white]{label}[/white] [bright_black]({detail_text})[/bright_black]"
                else:
                    line = f"{symbol} [white]{label}[/white]"

            tree.add(line)
        return tree


class Confirmer(Protocol):
    """Source of answers for the pipeline's interactive questions.

    ``key`` identifies the question (``remote``, ``repo_name``, ``private``,
    ``install``, ``release``) so scripted implementations can answer by name.
    """

    def confirm(self, key: str, question: str) -> bool: ...

    def ask(self, key: str, question: str, default: str | None = None) -> str: ...


def get_key():
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    # Ctrl+C
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt

    return key


class KeypressConfirmer:
    """Strict y/n confirmation: keys other than y or n are ignored."""

    def confirm(self, key: str, question: str) -> bool:
        console.print(f"[bold]{question}[/bold] [dim][y/n][/dim]: ", end="")
        while True:
            pressed = get_key().lower()
            if pressed in ("y", "n"):
                console.print(pressed)
                return pressed == "y"

    def ask(self, key: str, question: str, default: str | None = None) -> str:
        return typer.prompt(question, default=default).strip()


class PresetConfirmer:
    """Answer from a preset mapping, falling back for anything not preset.

    ``None`` values count as unanswered, which lets CLI flags left at their
    default fall through to the interactive prompt.
    """

    def __init__(self, answers: Mapping[str, bool | str | None], fallback: Confirmer | None = None):
        self.answers = {k: v for k, v in answers.items() if v is not None}
        self.fallback = fallback
        self.asked: list[str] = []

    def _answer(self, key: str):
        self.asked.append(key)
        if key in self.answers:
            return self.answers[key]
        if self.fallback is None:
            raise LookupError(f"No answer configured for '{key}'")
        return None

    def confirm(self, key: str, question: str) -> bool:
        answer = self._answer(key)
        if answer is None:
            return self.fallback.confirm(key, question)
        return bool(answer)

    def ask(self, key: str, question: str, default: str | None = None) -> str:
        answer = self._answer(key)
        if answer is None:
            return self.fallback.ask(key, question, default)
        return str(answer)
