from __future__ import annotations
import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence, Optional

logger = logging.getLogger(__name__)

class SpawnError(RuntimeError):
    pass

@dataclass
class CmdResult:
    returncode: int
    stdout: str
    stderr: str

def run_cmd(
    cmd: Sequence[str],
    cwd: Optional[str] = None,
    timeout: Optional[int] = None,
    input_text: Optional[str] = None,
) -> CmdResult:
    """Run cmd to completion and capture its output.

    The argv is passed straight to the OS (no shell), so arguments coming from
    JSON requests are never re-quoted or re-interpreted. When input_text is
    given it is written to the child's stdin, otherwise stdin is closed.
    """
    argv = list(cmd)
    logger.debug("exec: %s", argv)
    try:
        p = subprocess.run(
            argv,
            cwd=cwd,
            text=True,
            encoding="utf-8",
            errors="replace",
            input=input_text,
            stdin=None if input_text is not None else subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout,
            shell=False,
        )
    except OSError as e:
        raise SpawnError(f"{argv[0]}: {e.strerror or e}") from e
    logger.debug("exit %s: %s", p.returncode, argv[0])
    return CmdResult(p.returncode, p.stdout, p.stderr)

Runner = Callable[..., CmdResult]
