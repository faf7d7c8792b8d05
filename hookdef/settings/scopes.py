"""
Configuration scopes and the update/remove passes over them.

Each scope pairs a declaration file with the settings document it feeds:

    project  .claude/hooks/hooks.py        -> .claude/settings.json
    local    .claude/hooks/hooks.local.py  -> .claude/settings.local.json
    user     .claude/hooks/hooks.user.py   -> ~/.claude/settings.json

The user document is shared by every project, so its marker is namespaced
by the absolute project path and its commands use absolute paths.
"""

import json
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from ..config import HookdefConfig
from ..hooks.description import RegistryDescription
from ..hooks.errors import DescribeError, HookdefError
from ..logger import logger
from .marker import ManagedMarker
from .reconciler import ReconcileResult, reconcile, strip_managed
from .store import backup_settings, read_settings_text, write_settings

HOOKS_DIR = Path(".claude") / "hooks"

HOOK_FILES = {
    "project": "hooks.py",
    "local": "hooks.local.py",
    "user": "hooks.user.py",
}


@dataclass(frozen=True)
class Scope:
    """
    One declaration file and the settings document it is reconciled into.

    Attributes:
        name: "project", "local" or "user"
        hook_file: Absolute path of the declaration file
        settings_path: Settings document to update
        marker: Marker identifying this scope's entries in the document
        command_path: Declaration path as written into generated commands
    """
    name: str
    hook_file: Path
    settings_path: Path
    marker: ManagedMarker
    command_path: str

    @property
    def display_name(self) -> str:
        return str(HOOKS_DIR / self.hook_file.name)


def resolve_scopes(project_dir: Path, global_settings_path: Path) -> List[Scope]:
    """
    List the configuration scopes of a project, in processing order.

    Args:
        project_dir: Project root
        global_settings_path: The user-wide settings document

    Returns:
        List of Scope
    """
    project_dir = Path(project_dir).resolve()
    hooks_dir = project_dir / HOOKS_DIR
    claude_dir = project_dir / ".claude"

    return [
        Scope(
            name="project",
            hook_file=hooks_dir / HOOK_FILES["project"],
            settings_path=claude_dir / "settings.json",
            marker=ManagedMarker(),
            command_path=f"./{(HOOKS_DIR / HOOK_FILES['project']).as_posix()}",
        ),
        Scope(
            name="local",
            hook_file=hooks_dir / HOOK_FILES["local"],
            settings_path=claude_dir / "settings.local.json",
            marker=ManagedMarker(),
            command_path=f"./{(HOOKS_DIR / HOOK_FILES['local']).as_posix()}",
        ),
        Scope(
            name="user",
            hook_file=hooks_dir / HOOK_FILES["user"],
            settings_path=Path(global_settings_path),
            marker=ManagedMarker(namespace=str(project_dir)),
            command_path=str(hooks_dir / HOOK_FILES["user"]),
        ),
    ]


def describe_hook_file(hook_file: Path, timeout: float) -> RegistryDescription:
    """
    Run a declaration file in describe mode and parse its output.

    Args:
        hook_file: Declaration file
        timeout: Seconds to wait for it

    Returns:
        RegistryDescription

    Raises:
        DescribeError: If the file fails, times out or prints something unexpected
    """
    cmd = [sys.executable, "-m", "hookdef.runner", str(hook_file), "describe"]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(hook_file.parent),
        )
    except subprocess.TimeoutExpired:
        raise DescribeError(f"{hook_file} did not finish within {timeout:g}s")
    except OSError as e:
        raise DescribeError(f"Could not run {hook_file}: {e}")

    if result.returncode != 0:
        detail = result.stderr.strip() or f"exit code {result.returncode}"
        raise DescribeError(f"Failed to load hooks from {hook_file}: {detail}")

    try:
        data = json.loads(result.stdout)
    except ValueError as e:
        raise DescribeError(f"{hook_file} printed an invalid description: {e}")
    return RegistryDescription.from_dict(data)


@dataclass
class ScopeOutcome:
    """What happened to one scope during an update or remove pass."""
    scope: Scope
    action: str  # updated | unchanged | cleaned | skipped | failed
    added: int = 0
    removed: int = 0
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.action == "failed"


Describer = Callable[[Path, float], RegistryDescription]


class ScopeSync:
    """
    Runs the update and remove passes across all scopes of a project.

    A failure in one scope is logged and recorded in its ScopeOutcome; the
    remaining scopes are still processed.

    Example:
        sync = ScopeSync(Path.cwd(), load_config())
        outcomes = sync.update()
    """

    def __init__(
        self,
        project_dir: Path,
        config: HookdefConfig,
        scopes: Optional[List[Scope]] = None,
        describer: Optional[Describer] = None,
    ):
        """
        Initialize the scope sync.

        Args:
            project_dir: Project root
            config: Resolved configuration
            scopes: Scopes to process (default: resolve_scopes for project_dir)
            describer: Function that turns a declaration file into a description
        """
        self.project_dir = Path(project_dir)
        self.config = config
        self.scopes = scopes if scopes is not None else resolve_scopes(
            self.project_dir, config.resolved_global_settings_path()
        )
        self.describer = describer or describe_hook_file

    def update(self) -> List[ScopeOutcome]:
        """Regenerate managed entries for every scope."""
        outcomes = [self._guarded(scope, self._update_scope) for scope in self.scopes]

        if not any(scope.hook_file.exists() for scope in self.scopes):
            logger.info("No hook files found. Create one of:")
            for scope in self.scopes:
                logger.info(f"  - {scope.display_name} ({scope.name} settings)")
        return outcomes

    def remove(self) -> List[ScopeOutcome]:
        """Strip managed entries from every scope without regenerating them."""
        outcomes = [self._guarded(scope, self._remove_scope) for scope in self.scopes]

        if all(o.action == "skipped" for o in outcomes):
            logger.info("No settings files found to clean up.")
        return outcomes

    def _guarded(self, scope: Scope, step: Callable[[Scope], ScopeOutcome]) -> ScopeOutcome:
        try:
            return step(scope)
        except (HookdefError, OSError, ValueError) as e:
            logger.error(f"[scopes] {scope.name}: {e}")
            return ScopeOutcome(scope, "failed", error=str(e))

    def _update_scope(self, scope: Scope) -> ScopeOutcome:
        if scope.hook_file.exists():
            logger.info(f"Found {scope.display_name}")
            description = self.describer(scope.hook_file, self.config.describe_timeout)
            text = read_settings_text(scope.settings_path)
            result = reconcile(
                text, description, scope.marker, scope.command_path, self.config.runner
            )
            self._report_warnings(scope, result)

            if result.changed or text is None:
                self._write(scope, text, result)
                logger.info(f"Updated {scope.name} settings at {scope.settings_path}")
                action = "updated"
            else:
                logger.info(f"{scope.name} settings at {scope.settings_path} are up to date")
                action = "unchanged"
            return ScopeOutcome(scope, action, result.added, result.removed, result.warnings)

        if scope.settings_path.exists():
            logger.info(
                f"No {scope.display_name} found, cleaning up managed hooks from {scope.settings_path}"
            )
            return self._remove_scope(scope)

        return ScopeOutcome(scope, "skipped")

    def _remove_scope(self, scope: Scope) -> ScopeOutcome:
        text = read_settings_text(scope.settings_path)
        if text is None:
            return ScopeOutcome(scope, "skipped")

        result = strip_managed(text, scope.marker)
        self._report_warnings(scope, result)
        # Never rewrite a document we could not read just to remove nothing
        if result.removed == 0:
            return ScopeOutcome(scope, "unchanged", warnings=result.warnings)

        self._write(scope, text, result)
        logger.info(f"Removed {result.removed} managed hooks from {scope.settings_path}")
        return ScopeOutcome(scope, "cleaned", removed=result.removed, warnings=result.warnings)

    def _write(self, scope: Scope, text: Optional[str], result: ReconcileResult) -> None:
        if text is not None and result.warnings:
            backup_settings(scope.settings_path)
        write_settings(scope.settings_path, result.document)

    def _report_warnings(self, scope: Scope, result: ReconcileResult) -> None:
        for warning in result.warnings:
            logger.warning(f"[scopes] {scope.settings_path}: {warning}")
