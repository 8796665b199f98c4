"""
Thin wrapper around the ``git`` executable.

All git invocations go through ``GitRunner`` so the binding engine can
be exercised against a fake runner in tests.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import SubprocessFailure


@dataclass(frozen=True)
class GitResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner:
    def __init__(self, cwd: Optional[str | Path] = None, executable: str = "git"):
        self.cwd = Path(cwd) if cwd is not None else None
        self.executable = executable

    def command(self, *args: str) -> List[str]:
        return [self.executable, *args]

    def run_nothrow(self, *args: str, passthrough: bool = False) -> GitResult:
        """
        Run git and return its result whatever the exit status.

        With ``passthrough`` the output goes straight to the terminal
        (used for ``clone`` so git's progress stays visible) and the
        returned stdout/stderr are empty.
        """

        cmd = self.command(*args)
        try:
            result = subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=not passthrough,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            return GitResult(returncode=127, stderr=f"{self.executable}: command not found")

        return GitResult(
            returncode=result.returncode,
            stdout=(result.stdout or "").strip(),
            stderr=(result.stderr or "").strip(),
        )

    def run(self, *args: str, passthrough: bool = False) -> str:
        """
        Run git and return stripped stdout.

        Raises:
            SubprocessFailure: if git exits non-zero or cannot be started
        """

        result = self.run_nothrow(*args, passthrough=passthrough)
        if not result.ok:
            raise SubprocessFailure(self.command(*args), result.returncode, result.stderr)
        return result.stdout
