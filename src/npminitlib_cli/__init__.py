#!/usr/bin/env python3
"""
npminitlib - Bootstrap a TypeScript library project

Usage:
    npminitlib init <project-name>
    npminitlib init <project-name> --no-remote --no-install
    npminitlib check

The project directory is created under the current working directory and
filled with a package manifest, lint/format/test/release configuration, a
GitHub Actions release workflow and a license. A git repository is
initialized, and a GitHub repository, the npm dependencies and
semantic-release can optionally be set up.

Settings come from the environment (INIT_VERSION, GITHUB_ACCESS_TOKEN,
GITHUB_USERNAME), optionally loaded from a dotenv file first.
"""

import shutil
import sys
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.align import Align
from rich.panel import Panel
from typer.core import TyperGroup

from .catalog import ProjectSpec
from .provision import (
    ConflictError,
    ProvisionError,
    Provisioner,
    UsageError,
    run_command,
    ssl_context,
    validate_name,
)
from .settings import default_env_file, load_settings
from .ui import (
    KeypressConfirmer,
    PresetConfirmer,
    StepTracker,
    console,
    err_console,
    show_banner,
)

TOOLS = {
    "git": "Git version control",
    "npm": "npm package manager",
    "npx": "npx package runner",
    "code": "Visual Studio Code",
}


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


app = typer.Typer(
    name="npminitlib",
    help="Scaffold a TypeScript library with lint, test, CI and release tooling",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


@app.callback()
def callback(ctx: typer.Context):
    """Show banner when no subcommand is provided."""
    if ctx.invoked_subcommand is None and "--help" not in sys.argv and "-h" not in sys.argv:
        show_banner()
        console.print(Align.center("[dim]Run 'npminitlib --help' for usage information[/dim]"))
        console.print()


def check_tool(tool: str) -> bool:
    """Check if a tool is installed."""
    return shutil.which(tool) is not None


@app.command()
def init(
    project_name: str = typer.Argument(None, help="Name of the new project directory"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help=f"Settings file to load (default: {default_env_file()})"),
    remote: Optional[bool] = typer.Option(None, "--remote/--no-remote", help="Create a GitHub repository without asking"),
    repo_name: Optional[str] = typer.Option(None, "--repo-name", help="Name of the GitHub repository (asked when omitted)"),
    private: Optional[bool] = typer.Option(None, "--private/--public", help="Visibility of the GitHub repository"),
    install: Optional[bool] = typer.Option(None, "--install/--no-install", help="Run npm install without asking"),
    release: Optional[bool] = typer.Option(None, "--release/--no-release", help="Run semantic-release setup without asking"),
    no_editor: bool = typer.Option(False, "--no-editor", help="Do not open the project in VS Code"),
    skip_tls: bool = typer.Option(False, "--skip-tls", help="Skip SSL/TLS verification (not recommended)"),
    debug: bool = typer.Option(False, "--debug", help="Show diagnostic output when a step fails"),
):
    """
    Create a new library project.

    This command will:
    1. Check that the name is given and the directory does not exist yet
    2. Create the directory tree and write the boilerplate files
    3. Initialize a git repository with an initial commit
    4. Optionally create a GitHub repository and add it as origin
    5. Optionally run npm install
    6. Optionally run semantic-release setup (only when a GitHub repository was created)
    7. Open the project in VS Code

    Examples:
        npminitlib init my-lib
        npminitlib init my-lib --remote --private --repo-name my-lib
        npminitlib init my-lib --no-remote --no-install --no-editor
    """
    settings = load_settings(env_file)

    show_banner()

    try:
        name = validate_name(project_name)
    except UsageError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    spec = ProjectSpec.from_name(name, version=settings.init_version, author=settings.github_username)

    setup_lines = [
        "[cyan]Library Project Setup[/cyan]",
        "",
        f"{'Project':<15} [green]{spec.name}[/green]",
        f"{'Version':<15} [green]{spec.version}[/green]",
        f"{'Author':<15} [dim]{spec.author or '-'}[/dim]",
        f"{'Target Path':<15} [dim]{spec.target_directory}[/dim]",
    ]
    console.print(Panel("\n".join(setup_lines), border_style="cyan", padding=(1, 2)))

    confirmer = PresetConfirmer(
        {
            "remote": remote,
            "repo_name": repo_name,
            "private": private,
            "install": install,
            "release": release,
        },
        fallback=KeypressConfirmer(),
    )
    tracker = StepTracker(f"Initialize {spec.name}")

    with httpx.Client(verify=False if skip_tls else ssl_context) as client:
        provisioner = Provisioner(
            spec,
            settings,
            confirmer,
            run=run_command,
            client=client,
            tracker=tracker,
            open_editor=not no_editor,
        )
        try:
            provisioner.run()
        except ConflictError as e:
            error_panel = Panel(
                f"{e}\nRemove the existing directory or pick another name.",
                title="[red]Directory Conflict[/red]",
                border_style="red",
                padding=(1, 2),
            )
            console.print()
            console.print(error_panel)
            raise typer.Exit(1)
        except (ProvisionError, OSError) as e:
            console.print(tracker.render())
            console.print(Panel(f"Initialization failed: {e}", title="Failure", border_style="red"))
            if debug:
                _env_pairs = [
                    ("Python", sys.version.split()[0]),
                    ("Platform", sys.platform),
                    ("CWD", str(Path.cwd())),
                    ("Target", str(spec.target_directory)),
                ]
                _label_width = max(len(k) for k, _ in _env_pairs)
                env_lines = [f"{k.ljust(_label_width)} → [bright_black]{v}[/bright_black]" for k, v in _env_pairs]
                console.print(Panel("\n".join(env_lines), title="Debug Environment", border_style="magenta"))
            if spec.target_directory.exists():
                console.print(f"[yellow]Partially created project left in place:[/yellow] {spec.target_directory}")
            raise typer.Exit(1)

    console.print(tracker.render())
    console.print(f"\n[bold green]Project {spec.name} initialized.[/bold green]")

    steps_lines = [f"1. Go to the project folder: [cyan]cd {spec.name}[/cyan]"]
    if tracker.status("install") != "done":
        steps_lines.append("2. Install dependencies: [cyan]npm install[/cyan]")
    else:
        steps_lines.append("2. Run the tests: [cyan]npm test[/cyan]")
    steps_lines.append("3. Write your library in [cyan]src/index.ts[/cyan]")
    console.print()
    console.print(Panel("\n".join(steps_lines), title="Next Steps", border_style="cyan", padding=(1, 2)))


@app.command()
def check():
    """Check that the tools used by init are installed."""
    show_banner()
    console.print("[bold]Checking for installed tools...[/bold]\n")

    tracker = StepTracker("Check Available Tools")
    results = {}
    for tool, label in TOOLS.items():
        tracker.add(tool, label)
        results[tool] = check_tool(tool)
        if results[tool]:
            tracker.complete(tool, "available")
        else:
            tracker.error(tool, "not found")

    console.print(tracker.render())

    if all(results.values()):
        console.print("\n[bold green]npminitlib is ready to use![/bold green]")
    if not results["git"]:
        console.print("[dim]Tip: Install git for repository management[/dim]")
    if not (results["npm"] and results["npx"]):
        console.print("[dim]Tip: Install Node.js to get npm and npx[/dim]")
    if not results["code"]:
        console.print("[dim]Tip: Install VS Code or pass --no-editor to init[/dim]")


def main():
    app()


if __name__ == "__main__":
    main()
