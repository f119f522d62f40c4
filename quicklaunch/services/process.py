"""
Process Launcher - Start applications from their bundle path.

The launcher only spawns the opener command; it does not wait for the
application. Failures are logged and reported through the return value.
"""

import subprocess
import sys
from typing import Optional

from loguru import logger


def default_open_command() -> list[str]:
    """Platform opener with a {path} placeholder."""
    if sys.platform == "darwin":
        return ["open", "{path}"]
    return ["xdg-open", "{path}"]


class ProcessLauncher:
    """Spawn an opener command for an application path."""

    def __init__(self, command: Optional[list[str]] = None):
        self.command = list(command) if command else default_open_command()

    def build_argv(self, path: str) -> list[str]:
        argv = [part.replace("{path}", path) for part in self.command]
        if not any("{path}" in part for part in self.command):
            argv.append(path)
        return argv

    def launch(self, path: str) -> bool:
        """
        Launch the application at path.

        Args:
            path: Absolute path to the application bundle

        Returns:
            True if the opener was spawned, False otherwise
        """
        argv = self.build_argv(path)
        try:
            subprocess.Popen(
                argv,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError:
            logger.exception(f"Failed to launch {path} with {argv[0]}")
            return False

        logger.debug(f"Launched {path}")
        return True
