"""Hands the terminal over to the grader's editor and shell."""

import os
import shlex
import subprocess
from pathlib import Path
from typing import List

import config
from utils.logger import get_logger
from utils.error_handler import ExternalToolError

logger = get_logger()


def editor_command() -> List[str]:
    """The $EDITOR command split into arguments, falling back to vi."""
    return shlex.split(os.environ.get("EDITOR") or config.DEFAULT_EDITOR)


def shell_command() -> List[str]:
    return [os.environ.get("SHELL") or config.DEFAULT_SHELL]


def _run_interactive(command: List[str], cwd: Path | None = None) -> int:
    # Blocking on purpose: the child owns the terminal until it exits.
    logger.debug(f"Running {command} (cwd={cwd})")
    try:
        completed = subprocess.run(command, cwd=cwd, check=False)
    except OSError as e:
        logger.error(f"Could not start {command[0]}: {e}", exc_info=config.DEBUG)
        raise ExternalToolError(f"Could not start '{command[0]}': {e}") from e
    if completed.returncode != 0:
        logger.warning(f"{command[0]} exited with status {completed.returncode}.")
    return completed.returncode


def open_in_editor(path: Path) -> int:
    """Opens one file in the editor and waits until the editor exits."""
    return _run_interactive(editor_command() + [str(path)])


def open_shell(directory: Path) -> int:
    """Starts an interactive shell inside ``directory`` and waits for it to exit."""
    return _run_interactive(shell_command(), cwd=directory)
