"""Shell command execution for git operations.

Every git interaction in the workflow goes through `exec_command`, which runs a
literal command line in the system shell and returns its captured output.
"""

import asyncio
import logging
import shlex

from pivotal_git_workflow.exceptions import CommandFailedError

logger = logging.getLogger(__name__)


async def exec_command(command: str, raise_on_failure: bool = True) -> str:
    """Run a command line and return its standard output.

    Args:
        command: Command line passed verbatim to the shell.
        raise_on_failure: Raise when the command exits non-zero. Callers that
            expect failure (e.g. reading an unset config key) pass False.

    Returns:
        Captured standard output with surrounding whitespace removed.

    Raises:
        CommandFailedError: If the command fails and raise_on_failure is True.
    """
    logger.debug("Running: %s", command)
    process = await asyncio.create_subprocess_shell(
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    stdout, stderr = await process.communicate()
    output = stdout.decode("utf-8", errors="replace").strip()
    error_output = stderr.decode("utf-8", errors="replace").strip()
    logger.debug("Exit status %s: %s", process.returncode, command)

    if process.returncode != 0:
        if raise_on_failure:
            raise CommandFailedError(command, process.returncode, output, error_output)
        logger.debug("Ignoring failure of %s: %s", command, error_output)

    return output


def quote(value) -> str:
    """Quote a bare command line argument; empty values stay an argument."""
    return shlex.quote(str(value))


def quote_message(text: str) -> str:
    """Escape text for use inside a double-quoted shell argument.

    Plain text comes back unchanged.
    """
    for char in ('\\', '"', '$', '`'):
        text = text.replace(char, '\\' + char)
    return text
