"""
Run external programs (generators, the Go tool) with captured output.
"""

import subprocess
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from loguru import logger

from .cancel import CancelToken
from .exceptions import CommandError

__all__ = ['Runner', 'run_command']

# How often a running process is checked for cancellation, in seconds
POLL_INTERVAL = 0.1


class Runner(Protocol):
    def __call__(self, args: Sequence[str], cwd: Path | str | None = None,
                 cancel: CancelToken | None = None, log=logger,
                 env: Mapping[str, str] | None = None) -> str: ...


def run_command(args: Sequence[str], cwd: Path | str | None = None,
                cancel: CancelToken | None = None, log=logger,
                env: Mapping[str, str] | None = None) -> str:
    """
    Run a program and capture its combined stdout and stderr.

    :param args: Program and its arguments
    :param cwd: Working directory
    :param cancel: Cancellation token, the process is killed when it fires
    :param log: Logger
    :param env: Environment of the process (defaults to the current one)
    :return: The captured output
    :raises CommandError: If the program can't be started or exits with non-zero status
    :raises BuildCancelled: If cancelled before or while the program runs
    """
    args = [str(a) for a in args]
    if cancel is not None:
        cancel.check()
    log.info("{}{}", args, f" (in {cwd})" if cwd else "")

    try:
        proc = subprocess.Popen(args, cwd=cwd, env=env, stdout=subprocess.PIPE,
                                stderr=subprocess.STDOUT, stdin=subprocess.DEVNULL, text=True,
                                errors='replace')
    except OSError as e:
        raise CommandError(f"{args[0]}: {e}", command=args, returncode=127) from e

    with proc:
        while True:
            try:
                output, _ = proc.communicate(timeout=POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.cancelled:
                    proc.kill()
                    proc.communicate()
                    cancel.check()

    if proc.returncode != 0:
        raise CommandError(f"{args!r} exited with status {proc.returncode}",
                           command=args, returncode=proc.returncode, output=output or "")
    return output or ""
