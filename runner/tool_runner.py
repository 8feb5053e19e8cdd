"""Runs external tools over snippets of content, a few at a time."""

import asyncio
import os
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from loguru import logger

from scanner.errors import OptionsError
from .temp_files import TempFileTracker


ToolErrorCallback = Callable[[str], None]

DEFAULT_MAX_CONCURRENT = 4


@dataclass
class ToolDefinition:
    """A configured tool: its command line and an optional one-time setup."""

    command: List[str]
    setup_command: Optional[List[str]] = None
    description: str = ""
    setup_complete: bool = field(default=False, compare=False)


@dataclass
class ToolConfiguration:
    tools: Dict[str, ToolDefinition] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ToolConfiguration":
        """
        Parse ``{name: {command: [...], setup_command: [...], description: ...}}``.

        A bare string or list is taken as the command.

        Raises:
            OptionsError: If a tool has no command.
        """
        tools = {}
        for name, spec in (data or {}).items():
            if isinstance(spec, (str, list)):
                spec = {"command": spec}
            command = spec.get("command")
            if isinstance(command, str):
                command = command.split()
            if not command:
                raise OptionsError(f"Tool '{name}' must define a command")
            setup = spec.get("setup_command")
            if isinstance(setup, str):
                setup = setup.split()
            tools[name] = ToolDefinition(
                command=list(command),
                setup_command=list(setup) if setup else None,
                description=spec.get("description", ""),
            )
        return cls(tools)


def substitute_arguments(args: List[str], environment: Mapping[str, str]) -> List[str]:
    """
    Replace ``$NAME`` and ``$(NAME)`` references with values from ``environment``.
    """
    substitutions: List[Tuple[re.Pattern, str]] = []
    for key, value in environment.items():
        escaped = re.escape(key)
        substitutions.append((re.compile(rf"\$(\({escaped}\)|{escaped}\b)"), value))

    result = []
    for arg in args:
        for pattern, value in substitutions:
            arg = pattern.sub(lambda _match, value=value: value, arg)
        result.append(arg)
    return result


class ToolRunner:
    """
    Runs configured tools with at most ``max_concurrent`` processes at once.

    Content is handed to a tool through a temporary file whose path replaces
    ``$INPUT`` in the arguments; the tool's stdout is returned. Failures are
    reported through the error callback and yield empty output.
    """

    def __init__(
        self,
        configuration: ToolConfiguration,
        temp_files: TempFileTracker,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ):
        self.configuration = configuration
        self.temp_files = temp_files
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._setup_locks: Dict[str, asyncio.Lock] = {}

    async def _run_process(
        self,
        name: str,
        content: str,
        command: List[str],
        environment: Mapping[str, str],
        on_error: ToolErrorCallback,
    ) -> str:
        command_string = " ".join(command)
        logger.debug(f"Running tool {name}: {command_string}")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env={**os.environ, **environment},
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            on_error(
                f'Failed to run tool "{name}" as "{command_string}": {e}\n'
                f"Input to {name} was:\n{content}"
            )
            return ""

        if process.returncode != 0:
            on_error(
                f'Tool "{name}" returned non-zero exit code ({process.returncode}) '
                f'when run as "{command_string}" from {os.getcwd()}\n'
                f"Input to {name} was:\n{content}\n"
                f"Stderr output was:\n{stderr.decode('utf-8', errors='replace')}\n"
            )
            return ""
        return stdout.decode("utf-8", errors="replace")

    async def _run_setup(
        self,
        name: str,
        tool: ToolDefinition,
        environment: Mapping[str, str],
        on_error: ToolErrorCallback,
    ) -> None:
        lock = self._setup_locks.setdefault(name, asyncio.Lock())
        async with lock:
            if tool.setup_complete:
                return
            await self._run_process(name, "", list(tool.setup_command), environment, on_error)
            tool.setup_complete = True

    async def run(
        self,
        args: List[str],
        on_error: ToolErrorCallback,
        content: str = "",
        environment: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Run a tool and return its stdout.

        Args:
            args: Tool name followed by its extra arguments.
            on_error: Receives a description of each failure.
            content: Text written to the tool's ``$INPUT`` file.
            environment: Extra variables for the process and for substitution.

        Returns:
            The tool's stdout, or "" if it failed.
        """
        if not args:
            raise ValueError("args must name a tool")
        async with self._semaphore:
            return await self._run(list(args), on_error, content, environment or {})

    async def _run(
        self,
        args: List[str],
        on_error: ToolErrorCallback,
        content: str,
        environment: Mapping[str, str],
    ) -> str:
        name = args.pop(0)
        tool = self.configuration.tools.get(name)
        if tool is None:
            on_error(
                f'Unable to find definition for tool "{name}" in tool map. '
                f"Did you add it to the tool configuration?"
            )
            return ""

        input_file = self.temp_files.create_temporary_file(content)
        env_with_input = {
            "INPUT": str(input_file),
            "TOOL_COMMAND": tool.command[0],
            **environment,
        }
        if tool.setup_command:
            env_with_input["SETUP_COMMAND"] = tool.setup_command[0]
            if not tool.setup_complete:
                await self._run_setup(name, tool, env_with_input, on_error)

        command = tool.command + substitute_arguments(args, env_with_input)
        return await self._run_process(name, content, command, env_with_input, on_error)
