"""SDK tools — wrappers around the ServiceNow `now-sdk` CLI.

Tools: snc_auth_list, snc_auth_add, snc_auth_use, snc_init, snc_build,
snc_install, snc_dependencies, snc_transform, snc_clean.
Each call spawns one subprocess (no shell) with a wall-clock timeout and
relays its output. snc_auth_add only prints the command: it needs an
interactive terminal for the username and password.
"""

import asyncio
import logging
import os
import shlex
from typing import Annotated, Literal, Optional

from pydantic import Field

from snc_mcp.core import SDK_TIMEOUT, CommandResult, Settings

logger = logging.getLogger("snc_mcp.sdk")

Template = Literal[
    "base",
    "configuration",
    "typescript.basic",
    "typescript.react",
    "typescript.vue",
    "javascript.basic",
    "javascript.react",
    "partial.typescript.react",
    "partial.typescript.vue",
    "partial.javascript.react",
]

Directory = Annotated[Optional[str], Field(description="Project root directory")]
Auth = Annotated[Optional[str], Field(description="Auth alias (defaults to the CLI's active alias)")]


def command_line(argv) -> str:
    """Shell-quoted rendering of an argument list, for display only."""
    return shlex.join(argv)


async def _reap(proc) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()


async def run_command(argv, cwd: Optional[str] = None, timeout: float = SDK_TIMEOUT) -> CommandResult:
    """Run argv to completion and relay its output.

    Success gives stdout (or stderr when stdout is empty). A non-zero exit,
    a timeout or a failure to start gives an error result. Output is
    buffered, never streamed, and nothing is retried.
    """
    line = command_line(argv)
    env = {**os.environ, "FORCE_COLOR": "0", "NO_COLOR": "1"}
    logger.debug("Running %s (cwd=%s)", line, cwd or os.getcwd())

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        logger.warning("Could not start %s: %s", line, e)
        return CommandResult(f"Error: {e}", is_error=True)

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _reap(proc)
        logger.warning("Timed out after %gs: %s", timeout, line)
        return CommandResult(f"Error: Command timed out after {timeout:g}s: {line}", is_error=True)
    except BaseException:
        # cancelled: the child must not outlive the call
        await asyncio.shield(_reap(proc))
        logger.warning("Cancelled: %s", line)
        raise

    out = stdout.decode("utf-8", errors="replace").strip()
    err = stderr.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        logger.warning("%s exited with code %d", line, proc.returncode)
        return CommandResult(f"Error: {err or out or f'exit code {proc.returncode}'}", is_error=True)
    return CommandResult(out or err or "Command completed successfully.")


class SdkCommands:
    """The CLI tools, bound to one Settings instance."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def argv(self, *args: str) -> list[str]:
        return [*self.settings.sdk_command, *args]

    async def run(self, *args: str, directory: Optional[str] = None) -> str:
        result = await run_command(self.argv(*args), cwd=directory, timeout=self.settings.timeout)
        return result.unwrap()

    async def snc_auth_list(self) -> str:
        """List all saved ServiceNow authentication credentials."""
        return await self.run("auth", "--list")

    def snc_auth_add(
        self,
        instance: Annotated[str, Field(description="Instance name without domain (e.g. 'dev12345')")],
        alias: Annotated[Optional[str], Field(description="Alias for the credential (defaults to instance name)")] = None,
        type: Annotated[Literal["basic", "oauth"], Field(description="Authentication type")] = "basic",
    ) -> str:
        """Returns the command the user must run in their terminal to add ServiceNow auth credentials (interactive, cannot be automated)."""
        alias = alias or instance
        add = command_line(self.argv("auth", "--add", instance, "--type", type, "--alias", alias))
        use = command_line(self.argv("auth", "--use", alias))
        return (
            "This command requires interactive input (username/password). "
            f"Run it in your terminal:\n\n{add}\n\nThen set as default:\n{use}"
        )

    async def snc_auth_use(
        self,
        alias: Annotated[str, Field(description="Credential alias to set as default")],
    ) -> str:
        """Set the default authentication alias for SDK commands."""
        return await self.run("auth", "--use", alias)

    async def snc_init(
        self,
        appName: Annotated[str, Field(description="Application display name")],
        scopeName: Annotated[str, Field(description="Scope name (e.g. x_myorg_myapp, max 18 chars)")],
        template: Annotated[Template, Field(description="Project template")] = "typescript.basic",
        packageName: Annotated[Optional[str], Field(description="npm package name (defaults to kebab-case of appName)")] = None,
        auth: Annotated[Optional[str], Field(description="Auth alias (defaults to the server's configured alias)")] = None,
        directory: Annotated[Optional[str], Field(description="Working directory to run in")] = None,
    ) -> str:
        """Scaffold a new ServiceNow Fluent application."""
        args = ["init", "--appName", appName, "--scopeName", scopeName, "--template", template]
        if packageName:
            args += ["--packageName", packageName]
        args += ["--auth", auth or self.settings.default_auth_alias]
        return await self.run(*args, directory=directory)

    async def snc_build(self, directory: Directory = None) -> str:
        """Build/compile a ServiceNow Fluent application."""
        return await self.run("build", directory=directory)

    async def snc_install(self, directory: Directory = None, auth: Auth = None) -> str:
        """Deploy a built ServiceNow application to the instance."""
        args = ["install"]
        if auth:
            args += ["--auth", auth]
        return await self.run(*args, directory=directory)

    async def snc_dependencies(self, directory: Directory = None, auth: Auth = None) -> str:
        """Pull table type definitions from the ServiceNow instance for IDE autocompletion."""
        args = ["dependencies"]
        if auth:
            args += ["--auth", auth]
        return await self.run(*args, directory=directory)

    async def snc_transform(
        self,
        source: Annotated[
            Optional[str],
            Field(description="SYS_ID of legacy app on instance, or path to XML directory (passed as --from)"),
        ] = None,
        directory: Directory = None,
        auth: Auth = None,
    ) -> str:
        """Convert legacy ServiceNow application metadata (XML) to Fluent TypeScript."""
        args = ["transform"]
        if source:
            args += ["--from", source]
        if auth:
            args += ["--auth", auth]
        return await self.run(*args, directory=directory)

    async def snc_clean(self, directory: Directory = None) -> str:
        """Remove build output directories for a ServiceNow application."""
        return await self.run("clean", directory=directory)

    def tools(self) -> list:
        return [
            self.snc_auth_list,
            self.snc_auth_add,
            self.snc_auth_use,
            self.snc_init,
            self.snc_build,
            self.snc_install,
            self.snc_dependencies,
            self.snc_transform,
            self.snc_clean,
        ]
