"""
Runner for hook declaration files.

Usage:
    hookdef-run <declaration.py> describe
    hookdef-run <declaration.py> invoke <Event> [<matcher> <index>]

The declaration file is a plain Python module that builds a HookRegistry and
binds it to a module-level name ``hooks``. It is loaded by path; the runner
then hands the registry to the dispatcher.
"""

import importlib.util
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .dispatch import Dispatcher
from .hooks.errors import DeclarationError, RegistryLoadError
from .hooks.registry import HookRegistry
from .hooks.types import ExitCode
from .logger import configure_logging, logger

REGISTRY_ATTRIBUTE = "hooks"

USAGE = """\
Usage: hookdef-run <declaration-file> describe
       hookdef-run <declaration-file> invoke <Event> [<matcher> <index>]
"""


def load_registry(path: str) -> HookRegistry:
    """
    Load the HookRegistry defined by a declaration file.

    The registry is read from the module attribute ``hooks``. If that name is
    not defined, a single module-level HookRegistry is accepted instead.

    Args:
        path: Path to the declaration file

    Returns:
        HookRegistry

    Raises:
        DeclarationError: If the file registers an invalid hook
        RegistryLoadError: If the file is missing, fails to import or defines no registry
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise RegistryLoadError(f"Hook declaration file not found: {path}")

    module_name = f"_hookdef_declaration_{abs(hash(str(file_path.resolve())))}"
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise RegistryLoadError(f"Cannot load {path} as a Python module")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except DeclarationError:
        raise
    except Exception as e:
        raise RegistryLoadError(f"Failed to load hooks from {path}: {type(e).__name__}: {e}") from e

    registry = getattr(module, REGISTRY_ATTRIBUTE, None)
    if isinstance(registry, HookRegistry):
        return registry

    candidates = [v for v in vars(module).values() if isinstance(v, HookRegistry)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise RegistryLoadError(f"{path} does not define a HookRegistry named '{REGISTRY_ATTRIBUTE}'")
    raise RegistryLoadError(
        f"{path} defines {len(candidates)} registries; bind the one to use to '{REGISTRY_ATTRIBUTE}'"
    )


def run(argv: List[str]) -> int:
    """Run one request and return the exit code."""
    if not argv or argv[0] in ("-h", "--help"):
        stream = sys.stdout if argv else sys.stderr
        stream.write(USAGE)
        return ExitCode.SUCCESS if argv else ExitCode.ERROR

    path, args = argv[0], argv[1:]
    try:
        registry = load_registry(path)
    except (DeclarationError, RegistryLoadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    logger.debug(f"[runner] Loaded {len(registry)} hooks from {path}")
    return Dispatcher(registry).run(args)


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point for ``hookdef-run``."""
    try:
        config = load_config()
        level = config.log_level or "WARNING"
    except ValueError as e:
        # Settings problems must not stop hooks from running
        print(f"Warning: {e}", file=sys.stderr)
        level = "WARNING"
    configure_logging(level)
    sys.exit(int(run(sys.argv[1:] if argv is None else argv)))


if __name__ == "__main__":
    main()
