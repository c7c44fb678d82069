"""The provisioning pipeline behind ``npminitlib init``.

Steps run strictly in order::

    validate -> scaffold -> git (+ optional GitHub remote) -> npm install
             -> semantic-release setup (only with a remote) -> editor

Git and GitHub failures are reported and the pipeline keeps going, since the
project is still usable without version control. Failures of the install,
release and editor steps propagate to the caller. Nothing is rolled back:
whatever was created before a fatal error stays on disk (and on GitHub).
"""

import shutil
import ssl
import subprocess
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable

import httpx
import truststore

from .catalog import SUBDIRECTORIES, ContentEntry, ProjectSpec, build_catalog
from .settings import Settings
from .ui import Confirmer, StepTracker, console

ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

GITHUB_API_URL = "https://api.github.com/user/repos"
NPM_REGISTRY_URL = "https://registry.npmjs.org/"
GITHUB_URL = "https://github.com"


class ProvisionError(Exception):
    """Base class for every error raised by the pipeline."""


class UsageError(ProvisionError):
    """No project name was given."""


class ConflictError(ProvisionError):
    """The target directory already exists."""


class VcsError(ProvisionError):
    """Local git setup or remote repository creation failed."""


class InstallError(ProvisionError):
    """npm install failed."""


class ReleaseSetupError(ProvisionError):
    """semantic-release setup failed."""


class EditorLaunchError(ProvisionError):
    """The editor could not be opened."""


@dataclass(frozen=True)
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        detail = (self.stderr or self.stdout).strip()
        message = f"`{' '.join(self.args)}` exited with code {self.returncode}"
        return f"{message}: {detail}" if detail else message


def run_command(cmd: list[str], cwd: Path, stream: bool = False) -> CommandResult:
    """Run ``cmd`` in ``cwd`` and report the outcome instead of raising.

    With ``stream`` the child inherits stdio so its output shows up live;
    otherwise stdout/stderr are captured. A missing executable yields
    return code 127, any other failure to start the process 126.
    """
    executable = shutil.which(cmd[0]) or cmd[0]
    try:
        if stream:
            result = subprocess.run([executable, *cmd[1:]], cwd=cwd)
            return CommandResult(cmd, result.returncode)
        result = subprocess.run([executable, *cmd[1:]], cwd=cwd, capture_output=True, text=True)
        return CommandResult(cmd, result.returncode, result.stdout, result.stderr)
    except OSError as e:
        return CommandResult(cmd, 127 if isinstance(e, FileNotFoundError) else 126, stderr=str(e))


Runner = Callable[..., CommandResult]


def validate_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise UsageError("Please specify a project name:\n  >> npminitlib <project-name>")
    return name


def validate_directory_absent(target_directory: Path) -> None:
    if target_directory.exists():
        raise ConflictError(
            f"Directory '{target_directory.name}' already exists. Choose a different project name."
        )


def create_structure(target_directory: Path, entries: Iterable[ContentEntry]) -> None:
    """Create the project root, the fixed subdirectories, then every catalog file.

    Intermediate directories are never created on the fly: an entry whose parent
    is not the root or one of :data:`SUBDIRECTORIES` fails with an ``OSError``.
    """
    console.print(f"[cyan]Creating project in[/cyan] {target_directory}...")
    target_directory.mkdir()
    for subdir in SUBDIRECTORIES:
        path = target_directory / subdir
        path.mkdir()
        console.print(f"Directory created: [dim]{path}[/dim]")

    for entry in entries:
        path = target_directory / entry.relative_path
        with path.open("x", encoding="utf-8", newline="") as fh:
            fh.write(entry.content)
        console.print(f"File created: [dim]{path}[/dim]")

    console.print("[green]✓[/green] Project structure created")


def commit_message(spec: ProjectSpec) -> str:
    return f"feat: initial commit {spec.target_directory} v{spec.version}"


def init_local_repo(spec: ProjectSpec, run: Runner = run_command) -> None:
    """git init, stage everything, create the initial commit."""
    for cmd in (
        ["git", "init"],
        ["git", "add", "."],
        ["git", "commit", "-m", commit_message(spec)],
    ):
        result = run(cmd, cwd=spec.target_directory)
        if not result.ok:
            raise VcsError(result.describe())


def github_headers(token: str) -> dict:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github.v3+json",
        "Content-Type": "application/json",
    }


def create_remote_repo(
    repo_name: str,
    is_private: bool,
    settings: Settings,
    project_dir: Path,
    *,
    client: httpx.Client,
    run: Runner = run_command,
) -> str:
    """Create ``repo_name`` on GitHub and register it as ``origin``.

    Returns the remote URL. Any status >= 400 is treated as a failure.
    """
    if not settings.github_token:
        raise VcsError("GITHUB_ACCESS_TOKEN is not set; cannot create a remote repository")
    if not settings.github_username:
        raise VcsError("GITHUB_USERNAME is not set; cannot build the remote URL")

    try:
        response = client.post(
            GITHUB_API_URL,
            headers=github_headers(settings.github_token),
            json={"name": repo_name, "private": is_private},
            timeout=30,
        )
    except httpx.HTTPError as e:
        raise VcsError(f"Request to {GITHUB_API_URL} failed: {e}") from e

    if response.status_code >= 400:
        msg = f"GitHub API returned {response.status_code} for {GITHUB_API_URL}"
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("message") if isinstance(body, dict) else None
        detail = detail or response.text[:400]
        if detail:
            msg += f": {detail}"
        raise VcsError(msg)

    console.print(f"[green]✓[/green] Remote repository created: {GITHUB_URL}/{settings.github_username}/{repo_name}")
    remote_url = f"{GITHUB_URL}/{settings.github_username}/{repo_name}.git"
    result = run(["git", "remote", "add", "origin", remote_url], cwd=project_dir)
    if not result.ok:
        raise VcsError(result.describe())
    console.print(f"[green]✓[/green] Remote added: {remote_url}")
    return remote_url


def release_setup_command(token: str | None) -> list[str]:
    return [
        "npx",
        "semantic-release-cli",
        "setup",
        "--ci",
        "--npm-package",
        f"--npm-registry={NPM_REGISTRY_URL}",
        f"--github-token={token or ''}",
        f"--github-url={GITHUB_URL}",
        "--ci-provider=github-actions",
    ]


@dataclass(frozen=True)
class PipelineState:
    stage: str = "idle"
    remote_repo_created: bool = False

    def advance(self, stage: str, **changes) -> "PipelineState":
        return replace(self, stage=stage, **changes)


PIPELINE_STEPS = [
    ("validate", "Validate project name and directory"),
    ("scaffold", "Create project structure"),
    ("git", "Initialize git repository"),
    ("remote", "Create GitHub repository"),
    ("install", "Install dependencies"),
    ("release", "Configure semantic-release"),
    ("editor", "Open in editor"),
]


class Provisioner:
    """Runs the pipeline for one :class:`ProjectSpec`.

    Every external effect goes through an injected collaborator: ``confirmer``
    for questions, ``run`` for processes and ``client`` for the GitHub call.
    Each step takes the current :class:`PipelineState` and returns the next one.
    """

    def __init__(
        self,
        spec: ProjectSpec,
        settings: Settings,
        confirmer: Confirmer,
        *,
        run: Runner = run_command,
        client: httpx.Client | None = None,
        tracker: StepTracker | None = None,
        open_editor: bool = True,
    ):
        self.spec = spec
        self.settings = settings
        self.confirmer = confirmer
        self.run_cmd = run
        self.client = client
        self.tracker = tracker or StepTracker(f"Initialize {spec.name}")
        self.open_editor = open_editor
        for key, label in PIPELINE_STEPS:
            self.tracker.add(key, label)

    def run(self) -> PipelineState:
        state = PipelineState()
        for step in (
            self.validate,
            self.scaffold,
            self.initialize_vcs,
            self.install_dependencies,
            self.configure_release,
            self.launch_editor,
        ):
            state = step(state)
        return state.advance("done")

    def validate(self, state: PipelineState) -> PipelineState:
        validate_name(self.spec.name)
        try:
            validate_directory_absent(self.spec.target_directory)
        except ConflictError:
            self.tracker.error("validate", "directory exists")
            raise
        self.tracker.complete("validate", self.spec.name)
        return state.advance("validated")

    def scaffold(self, state: PipelineState) -> PipelineState:
        entries = build_catalog(self.spec)
        try:
            create_structure(self.spec.target_directory, entries)
        except OSError as e:
            self.tracker.error("scaffold", str(e))
            raise
        self.tracker.complete("scaffold", f"{len(entries)} files")
        return state.advance("scaffolded")

    def initialize_vcs(self, state: PipelineState) -> PipelineState:
        console.print("[cyan]Initializing git repository...[/cyan]")
        try:
            init_local_repo(self.spec, run=self.run_cmd)
        except VcsError as e:
            console.print(f"[red]Error initializing git repository:[/red] {e}")
            self.tracker.error("git", "init failed")
            self.tracker.skip("remote", "no local repository")
            return state.advance("vcs-initialized")
        console.print("[green]✓[/green] Git repository initialized")
        self.tracker.complete("git", "initial commit")

        if not self.confirmer.confirm("remote", "Create a remote repository on GitHub?"):
            console.print("[yellow]No remote repository created.[/yellow]")
            self.tracker.skip("remote", "declined")
            return state.advance("vcs-initialized")

        repo_name = self.confirmer.ask("repo_name", "GitHub repository name", self.spec.name)
        is_private = self.confirmer.confirm("private", "Should the repository be private?")
        client = self.client or httpx.Client(verify=ssl_context)
        try:
            remote_url = create_remote_repo(
                repo_name,
                is_private,
                self.settings,
                self.spec.target_directory,
                client=client,
                run=self.run_cmd,
            )
        except VcsError as e:
            console.print(f"[red]Error creating remote repository:[/red] {e}")
            self.tracker.error("remote", "creation failed")
            return state.advance("vcs-initialized")
        finally:
            if self.client is None:
                client.close()
        self.tracker.complete("remote", remote_url)
        return state.advance("vcs-initialized", remote_repo_created=True)

    def install_dependencies(self, state: PipelineState) -> PipelineState:
        if not self.confirmer.confirm("install", "Install dependencies?"):
            console.print("[yellow]Dependency installation skipped.[/yellow]")
            self.tracker.skip("install", "declined")
            return state.advance("deps-resolved")

        console.print("[cyan]Installing dependencies...[/cyan]")
        self.tracker.start("install", "npm install")
        result = self.run_cmd(["npm", "install"], cwd=self.spec.target_directory, stream=True)
        if not result.ok:
            self.tracker.error("install", f"exit {result.returncode}")
            raise InstallError(result.describe())
        console.print("[green]✓[/green] Dependencies installed")
        self.tracker.complete("install", "npm install")
        return state.advance("deps-resolved")

    def configure_release(self, state: PipelineState) -> PipelineState:
        if not state.remote_repo_created:
            self.tracker.skip("release", "no remote repository")
            return state.advance("release-configured")
        if not self.confirmer.confirm("release", "Configure semantic-release?"):
            console.print("[yellow]semantic-release configuration skipped.[/yellow]")
            self.tracker.skip("release", "declined")
            return state.advance("release-configured")

        console.print("[cyan]Configuring semantic-release...[/cyan]")
        self.tracker.start("release", "semantic-release-cli setup")
        result = self.run_cmd(
            release_setup_command(self.settings.github_token),
            cwd=self.spec.target_directory,
            stream=True,
        )
        if not result.ok:
            self.tracker.error("release", f"exit {result.returncode}")
            raise ReleaseSetupError(result.describe())
        console.print("[green]✓[/green] semantic-release configured")
        self.tracker.complete("release", "github-actions")
        return state.advance("release-configured")

    def launch_editor(self, state: PipelineState) -> PipelineState:
        if not self.open_editor:
            self.tracker.skip("editor", "--no-editor")
            return state.advance("editor-opened")
        result = self.run_cmd(["code", "."], cwd=self.spec.target_directory)
        if not result.ok:
            self.tracker.error("editor", f"exit {result.returncode}")
            raise EditorLaunchError(result.describe())
        self.tracker.complete("editor", "code .")
        return state.advance("editor-opened")
