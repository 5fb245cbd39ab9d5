"""
Compositor backend interface.

A backend knows how to list the outputs of a running compositor and how to
change the mode of one output. Everything compositor-specific lives behind
this interface so planning can run against a fake.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Callable, Dict, List

from ..exceptions import (
    ApplyError,
    CompositorCommunicationError,
    CompositorNotFoundError,
)
from ..models import Mode, Output


def format_number(value: float) -> str:
    """
    Format a scale or refresh rate for a compositor command line.

    Uses the shortest text that reads back as the same float, so a saved
    value is applied exactly and restoring twice is a no-op.

        >>> format_number(60.0), format_number(1.6666666)
        ('60', '1.6666666')
    """
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


class Backend(ABC):
    """Abstract base class for compositor backends."""

    name = "backend"
    default_executable = ""

    def __init__(self, executable: str = "", timeout: int = 10) -> None:
        self.executable = executable or self.default_executable
        self.timeout = timeout
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def enumerate(self) -> List[Output]:
        """
        List all outputs known to the compositor, including disabled ones.

        Returns:
            Outputs in compositor order

        Raises:
            EnumerationError: If the compositor cannot be queried
        """
        pass

    @abstractmethod
    def apply(self, output: Output, mode: Mode) -> None:
        """
        Apply a mode to a single output.

        Args:
            output: Output to configure, addressed by its current name
            mode: Target mode; a disabled mode turns the output off

        Raises:
            ApplyError: If the compositor rejects the change
        """
        pass

    @abstractmethod
    def apply_preferred(self, output: Output, x: int) -> int:
        """
        Enable an output at its preferred mode, scale 1, positioned at (x, 0).

        Returns:
            Width the output occupies, for placing the next one to its right

        Raises:
            ApplyError: If the compositor rejects the change
        """
        pass

    def disable(self, output: Output) -> None:
        """Turn an output off."""
        self.apply(output, replace(output.mode, enabled=False))

    def _parse_outputs(
        self,
        data: Any,
        parse: Callable[[Dict[str, Any]], Output],
    ) -> List[Output]:
        """
        Parse a JSON list of outputs with one parser per entry.

        Raises:
            CompositorCommunicationError: If the list or any entry is malformed
        """
        if not isinstance(data, list):
            raise CompositorCommunicationError(
                f"Unexpected {self.name} output: expected a list, got {type(data).__name__}"
            )

        outputs = []
        for index, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise CompositorCommunicationError(
                    f"Unexpected {self.name} output: entry {index} is "
                    f"{type(entry).__name__}, expected an object"
                )
            try:
                outputs.append(parse(entry))
            except (AttributeError, TypeError, ValueError, KeyError) as e:
                raise CompositorCommunicationError(
                    f"Malformed {self.name} output entry {index}: {type(e).__name__}: {e}"
                ) from e

        self.logger.info(f"Detected {len(outputs)} outputs via {self.name}")
        return outputs


    def _query_json(self, args: List[str]) -> Any:
        """
        Run a query command and parse its JSON output.

        Raises:
            CompositorNotFoundError: If the executable is not installed
            CompositorCommunicationError: On failure, timeout or invalid JSON
        """
        cmd = [self.executable] + args
        cmd_str = ' '.join(cmd)
        self.logger.debug(f"Running command: {cmd_str}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CompositorCommunicationError(
                f"Timeout querying outputs after {e.timeout}s.\n"
                f"'{cmd_str}' took too long to respond."
            ) from e
        except FileNotFoundError as e:
            raise CompositorNotFoundError(
                f"Could not find '{self.executable}' command.\n"
                f"Make sure {self.executable} is installed and in PATH."
            ) from e
        except OSError as e:
            raise CompositorCommunicationError(f"Failed to run '{cmd_str}': {e}") from e

        if result.returncode != 0:
            error_msg = result.stderr.strip() or "Unknown error"
            raise CompositorCommunicationError(
                f"Failed to query outputs from {self.name}: {error_msg}\n"
                f"Make sure your compositor is running and '{cmd_str}' works."
            )

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CompositorCommunicationError(
                f"Failed to parse {self.name} JSON output: {e}\n"
                "The compositor returned invalid JSON. This may indicate a version mismatch."
            ) from e

    def _run_command(self, args: List[str], output_name: str) -> str:
        """
        Run a configuration command for one output.

        Returns:
            Captured stdout

        Raises:
            ApplyError: If the command cannot be run or exits non-zero
        """
        cmd = [self.executable] + args
        cmd_str = ' '.join(cmd)
        self.logger.debug(f"Running command: {cmd_str}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ApplyError(f"Command timed out after {e.timeout}s: {cmd_str}") from e
        except FileNotFoundError as e:
            raise ApplyError(
                f"Command not found: {self.executable} - ensure it is installed and in PATH"
            ) from e
        except OSError as e:
            raise ApplyError(f"OS error executing command {cmd_str}: {e}") from e

        if result.returncode != 0:
            error_msg = f"Failed to configure {output_name}: exit code {result.returncode}: {cmd_str}"
            if result.stderr:
                error_msg += f"\nStderr: {result.stderr.strip()}"
            elif result.stdout:
                error_msg += f"\nStdout: {result.stdout.strip()}"
            raise ApplyError(error_msg)

        self.logger.debug(f"Command succeeded: {cmd_str}")
        return result.stdout
