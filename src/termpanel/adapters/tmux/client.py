"""Tmux client for subprocess-based tmux interaction."""

import asyncio
import contextlib
import logging

logger = logging.getLogger(__name__)

# Use tab as delimiter to avoid conflicts with colons in data (paths, titles)
_FIELD_SEP = "\t"


class TmuxClient:
    """Client for interacting with tmux via subprocess commands.

    Provides async methods for:
    - Creating, moving and killing panes
    - Querying pane/window formats
    - Selecting panes and showing messages
    - Waiting on wait-for channels
    """

    def __init__(self, socket_path: str | None = None):
        """Initialize TmuxClient.

        Args:
            socket_path: Optional tmux socket path. If None, uses default socket.
        """
        self._socket_path = socket_path

    @property
    def socket_path(self) -> str | None:
        return self._socket_path

    def base_command(self) -> list[str]:
        """tmux argv prefix, including the socket when one is configured."""
        cmd = ["tmux"]
        if self._socket_path:
            cmd.extend(["-S", self._socket_path])
        return cmd

    async def run(self, *args: str) -> str | None:
        """Execute a tmux command.

        Args:
            *args: Command arguments (e.g., "list-panes", "-F", "...")

        Returns:
            Command stdout on success, None on failure.
        """
        cmd = self.base_command()
        cmd.extend(args)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            try:
                stdout, stderr = await proc.communicate()
            except asyncio.CancelledError:
                # a cancelled communicate() leaves the child running
                await self._kill(proc)
                raise

            if proc.returncode != 0:
                logger.warning(f"tmux command failed: {' '.join(cmd)}: {stderr.decode()}")
                return None

            return stdout.decode()

        except Exception as e:
            logger.error(f"tmux subprocess error: {e}")
            return None

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is not None:
            return
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()

    async def display(self, fmt: str, target: str | None = None) -> str | None:
        """Expand a format string, optionally against a target pane.

        Returns:
            Expanded value without trailing newline, or None on failure.
        """
        args = ["display-message", "-p"]
        if target:
            args.extend(["-t", target])
        args.append(fmt)
        output = await self.run(*args)
        if output is None:
            return None
        return output.rstrip("\n")

    async def display_fields(self, fields: list[str], target: str | None = None) -> list[str] | None:
        """Expand several formats at once, split on the field separator."""
        output = await self.display(_FIELD_SEP.join(fields), target=target)
        if output is None:
            return None
        parts = output.split(_FIELD_SEP)
        if len(parts) != len(fields):
            logger.warning(f"Unexpected display output: {output!r}")
            return None
        return parts

    async def get_active_pane(self) -> str | None:
        """Get the currently active pane ID.

        Returns:
            Pane ID string (e.g., "%2"), or None if tmux not running.
        """
        output = await self.display("#{pane_id}")
        return output or None

    async def list_panes(self, target: str | None = None) -> list[dict]:
        """List panes of a window (current window by default).

        Returns:
            List of pane dicts with keys:
            - pane_id: str
            - active: bool
            - last: bool (the pane `last-pane` would select)
        """
        fmt = _FIELD_SEP.join(["#{pane_id}", "#{pane_active}", "#{pane_last}"])
        args = ["list-panes", "-F", fmt]
        if target:
            args.extend(["-t", target])
        output = await self.run(*args)

        if not output:
            return []

        panes = []
        for line in output.strip().split("\n"):
            if not line:
                continue
            parts = line.split(_FIELD_SEP)
            if len(parts) >= 3:
                panes.append(
                    {
                        "pane_id": parts[0],
                        "active": parts[1] == "1",
                        "last": parts[2] == "1",
                    }
                )
            else:
                logger.warning(f"Failed to parse pane line: {line!r}")

        return panes

    async def has_session(self, name: str) -> bool:
        """Check whether a session with exactly this name exists."""
        result = await self.run("has-session", "-t", f"={name}")
        return result is not None

    async def new_session(self, name: str, command: str) -> bool:
        """Create a detached session running command."""
        result = await self.run("new-session", "-d", "-s", name, command)
        return result is not None

    async def new_window(self, session: str, name: str, command: str) -> str | None:
        """Create a detached window in session.

        Returns:
            Pane ID of the new window's pane, or None on failure.
        """
        output = await self.run(
            "new-window", "-d", "-P", "-F", "#{pane_id}", "-t", f"={session}:", "-n", name, command
        )
        if output is None:
            return None
        return output.strip() or None

    async def select_pane(self, pane_id: str) -> bool:
        """Select/activate a pane.

        Args:
            pane_id: The pane identifier

        Returns:
            True on success, False on failure.
        """
        result = await self.run("select-pane", "-t", pane_id)
        return result is not None

    async def set_pane_title(self, pane_id: str, title: str) -> bool:
        """Set a pane's title."""
        result = await self.run("select-pane", "-t", pane_id, "-T", title)
        return result is not None

    async def set_pane_style(self, pane_id: str, style: str) -> bool:
        """Set a pane's style (e.g. "bg=colour235")."""
        result = await self.run("select-pane", "-t", pane_id, "-P", style)
        return result is not None

    async def join_pane(
        self, source: str, target: str, size: int, vertical: bool = True, before: bool = False
    ) -> bool:
        """Move source pane next to target without changing the active pane.

        Args:
            source: Pane to move
            target: Pane to split
            size: Size of the moved pane (lines for vertical, columns otherwise)
            vertical: Split top/bottom when True, left/right otherwise
            before: Place source above/left of target
        """
        args = ["join-pane", "-d", "-v" if vertical else "-h"]
        if before:
            args.append("-b")
        args.extend(["-l", str(max(size, 1)), "-s", source, "-t", target])
        result = await self.run(*args)
        return result is not None

    async def break_pane(self, pane_id: str, session: str) -> bool:
        """Move pane into its own window in session, in the background."""
        result = await self.run("break-pane", "-d", "-s", pane_id, "-t", f"={session}:")
        return result is not None

    async def swap_pane(self, source: str, target: str) -> bool:
        """Swap two panes without changing the active pane."""
        result = await self.run("swap-pane", "-d", "-s", source, "-t", target)
        return result is not None

    async def kill_pane(self, pane_id: str) -> bool:
        result = await self.run("kill-pane", "-t", pane_id)
        return result is not None

    async def resize_pane(self, pane_id: str, width: int, height: int) -> bool:
        result = await self.run(
            "resize-pane", "-t", pane_id, "-x", str(max(width, 1)), "-y", str(max(height, 1))
        )
        return result is not None

    async def respawn_pane(self, pane_id: str, command: str, env: dict[str, str] | None = None) -> bool:
        """Kill whatever runs in pane and start command in its place."""
        args = ["respawn-pane", "-k", "-t", pane_id]
        for key, value in (env or {}).items():
            args.extend(["-e", f"{key}={value}"])
        args.append(command)
        result = await self.run(*args)
        return result is not None

    async def set_option(self, target: str, name: str, value: str, scope: str = "-p") -> bool:
        """Set an option on a pane (-p) or window (-w)."""
        result = await self.run("set-option", scope, "-t", target, name, value)
        return result is not None

    async def copy_mode(self, pane_id: str, *args: str) -> bool:
        result = await self.run("copy-mode", *args, "-t", pane_id)
        return result is not None

    async def send_copy_command(self, pane_id: str, command: str, repeat: int = 1) -> bool:
        """Send a copy-mode command (send-keys -X) to pane."""
        args = ["send-keys", "-t", pane_id]
        if repeat > 1:
            args.extend(["-N", str(repeat)])
        args.extend(["-X", command])
        result = await self.run(*args)
        return result is not None

    async def wait_for(self, channel: str) -> bool:
        """Block until channel is signalled."""
        result = await self.run("wait-for", channel)
        return result is not None

    async def signal(self, channel: str) -> bool:
        """Wake every client waiting on channel."""
        result = await self.run("wait-for", "-S", channel)
        return result is not None

    async def display_message(self, message: str, duration_ms: int) -> bool:
        """Show a message in the status line of the current client."""
        result = await self.run("display-message", "-d", str(duration_ms), message)
        return result is not None
