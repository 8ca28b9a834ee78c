"""Spawning of external processes (user shell commands)."""

import signal
import subprocess
from typing import List, Optional

from git_phantom.exceptions import (
    GitPhantomError,
    ProcessExecutionError,
    ProcessSignalError,
    ProcessSpawnError,
)
from git_phantom.models.result import Err, Ok, Result


def spawn_process(command: List[str], cwd: Optional[str] = None,
                  env: Optional[dict] = None) -> Result[int, GitPhantomError]:
    """Run ``command`` to completion with inherited stdio.

    Returns:
        Ok(0) on success; Err(ProcessSpawnError) if it could not start,
        Err(ProcessSignalError) if a signal killed it, otherwise
        Err(ProcessExecutionError) carrying the exit code.
    """
    try:
        completed = subprocess.run(command, cwd=cwd, env=env, check=False)
    except OSError as e:
        return Err(ProcessSpawnError(command[0], e.strerror or str(e)))

    returncode = completed.returncode
    if returncode < 0:
        try:
            signal_name = signal.Signals(-returncode).name
        except ValueError:
            signal_name = str(-returncode)
        return Err(ProcessSignalError(signal_name))
    if returncode != 0:
        return Err(ProcessExecutionError(command[0], returncode))
    return Ok(returncode)
