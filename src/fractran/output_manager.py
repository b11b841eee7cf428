# output_manager.py

import os

from fractran.fmt import strip_ansi
from fractran.workspace import workspace_dir


def resolve_output_path(path: str, workspace_root: str) -> str:
    """
    Resolve user-provided output path.

    Rules:
    - '~' expanded to user home
    - Absolute paths unchanged
    - Relative paths are relative to workspace_root
    """
    if not path:
        raise ValueError("Output path is empty")

    path = os.path.expanduser(path)

    if os.path.isabs(path):
        return os.path.normpath(path)

    return os.path.normpath(os.path.join(workspace_root, path))


class OutputManager:
    """
    Handles all printing/output, to screen and/or one file.

    Usage:
        om = OutputManager(output_file="traces/primegame.txt")
        om.write("Hello")   # prints and appends (ANSI stripped) to the file
        om.close()          # blank line between runs
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False):
        """
        Parameters:
            output_file:
                None or ""       => screen only
                path/to/file.txt => append all runs to this file
            quiet: if True, no output to screen (only to file)

        Nothing is kept in memory: a trace can be unbounded. The file is
        opened on the first write and held until close().
        """
        self.quiet = quiet
        self.output_file = output_file or ""
        self._path: str | None = None
        self._fh = None
        self.lines_written = 0

        if self.output_file:
            path = resolve_output_path(self.output_file, str(workspace_dir()))

            # Ensure parent folder exists (important for workspace-relative paths like "logs/out.txt")
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            self._path = path

    @property
    def path(self) -> str | None:
        return self._path

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Write to screen and file (if configured)."""
        text = sep.join(str(a) for a in args) + end
        self.lines_written += 1

        if not self.quiet:
            print(text, end="")

        if self._path:
            if self._fh is None:
                self._fh = open(self._path, "a", encoding="utf-8")  # noqa: SIM115
            self._fh.write(strip_ansi(text))

    def write_screen(self, *args, sep: str = " ", end: str = "\n", flush: bool = True) -> None:
        """Write only to the screen, never to the file."""
        if self.quiet:
            return
        print(*args, sep=sep, end=end, flush=flush)

    def close(self) -> None:
        """Add a separator line between runs in the output file and release it."""
        if self._fh is None:
            return
        try:
            self._fh.write("\n")
        finally:
            self._fh.close()
            self._fh = None
