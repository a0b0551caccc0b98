"""
Command execution utilities.

This module provides the subprocess helper used by the ``exec`` task.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def run_command(
    command: str, cwd: Path, shell: bool = True, executable_shell: Optional[str] = None
) -> Tuple[int, str, str]:
    """Execute a command and capture its output.

    Runs a subprocess command in the specified directory, capturing both stdout
    and stderr while handling launch failures gracefully.

    Args:
        command: The command string to execute.
        cwd: Working directory path for command execution.
        shell: Whether to use shell for execution (default: True).
        executable_shell: Specific shell executable path (e.g., '/bin/bash').

    Returns:
        Tuple of (return_code, stdout_string, stderr_string).
        return_code is -1 for execution errors.

    Note:
        Uses UTF-8 encoding with error replacement for robust text handling.
    """
    logger.debug(f"Executing command: '{command}' in '{cwd}'")
    try:
        process = subprocess.run(
            command if shell else shlex.split(command),
            cwd=cwd,
            shell=shell,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            executable=executable_shell,
            check=False,
        )
        return process.returncode, process.stdout, process.stderr
    except FileNotFoundError as e:
        program = shlex.split(command)[0] if command.strip() else command
        logger.error(f"Command not found: {program}: {type(e).__name__}: {e}")
        return -1, "", f"Error: Command not found '{program}'"
    except OSError as e:
        logger.error(f"Failed to run command '{command[:50]}': {type(e).__name__}: {e}", exc_info=True)
        return -1, "", f"Error: {e}"
