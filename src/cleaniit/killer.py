"""Terminate a backend process through an external command."""

import logging
import shlex
import subprocess

from .constants import DEFAULT_KILL_COMMAND
from .errors import ActuationError, InvalidArgument

logger = logging.getLogger(__name__)


def build_command(template: str, pid: int) -> list[str]:
    """Split the command template and substitute {pid} in each argument."""
    try:
        args = shlex.split(template)
    except ValueError as e:
        raise InvalidArgument(f"invalid kill command {template!r}: {e}") from None
    if not args:
        raise InvalidArgument("the kill command is empty")
    return [arg.replace("{pid}", str(pid)) for arg in args]


class ProcessKiller:
    def __init__(self, template: str = DEFAULT_KILL_COMMAND):
        # validate the template before any I/O
        build_command(template, 0)
        self.template = template

    def kill(self, pid: int) -> None:
        """Run the kill command for pid and wait for it to complete."""
        command = build_command(self.template, pid)
        logger.debug("Executing: %s", " ".join(command))
        try:
            result = subprocess.run(command, text=True, capture_output=True)
        except OSError as e:
            raise ActuationError(f"unable to run {command[0]}: {e}") from e
        if result.stdout.strip():
            logger.info(result.stdout.strip())
        if result.returncode != 0:
            logger.warning(
                "kill command for %d exited with status %d: %s", pid, result.returncode, result.stderr.strip()
            )
