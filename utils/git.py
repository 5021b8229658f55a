import os
import subprocess
import threading
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from utils.errors import ExternalCommandError
from utils.logger import logger

MAX_OUTPUT_BYTES = 10 * 1024 * 1024
DEFAULT_TIMEOUT_SEC = 120
READ_CHUNK_BYTES = 64 * 1024

PathLike = Union[str, Path]


def _read_capped(stream, limit: int) -> Tuple[bytes, bool]:
    """Reads at most limit + 1 bytes; the flag tells whether the limit was exceeded."""
    chunks = []
    size = 0
    while size <= limit:
        chunk = stream.read(min(READ_CHUNK_BYTES, limit + 1 - size))
        if not chunk:
            break
        chunks.append(chunk)
        size += len(chunk)
    return b"".join(chunks), size > limit


def run_command(
    args: Sequence[str],
    cwd: Optional[PathLike] = None,
    timeout: int = DEFAULT_TIMEOUT_SEC,
) -> Optional[str]:
    """
    Runs an external command and returns its trimmed stdout.

    Any failure (non-zero exit, missing binary, timeout, output above
    MAX_OUTPUT_BYTES) is reported as None rather than raised. Callers treat
    None as "no data". Output is read incrementally and the command is killed
    as soon as it goes over the cap.

    Args:
        args: The command and its arguments.
        cwd: The working directory to run the command in.
        timeout: Seconds to wait before giving up on the command.

    Returns:
        The trimmed standard output, or None if the command failed.
    """
    command = " ".join(args)
    try:
        process = subprocess.Popen(
            list(args),
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        logger.debug(f"Executable not found: {args[0]}")
        return None
    except OSError as e:
        logger.debug(f"Could not run {command}: {e}")
        return None

    expired = threading.Event()

    def expire():
        expired.set()
        process.kill()

    timer = threading.Timer(timeout, expire)
    timer.start()
    try:
        output, overflow = _read_capped(process.stdout, MAX_OUTPUT_BYTES)
        if overflow:
            process.kill()
        returncode = process.wait()
    finally:
        timer.cancel()
        process.stdout.close()

    if expired.is_set():
        logger.warning(f"Command timed out after {timeout}s: {command}")
        return None
    if overflow:
        logger.warning(f"Output of '{command}' exceeds {MAX_OUTPUT_BYTES} bytes, discarding.")
        return None
    if returncode != 0:
        logger.debug(f"Command exited with {returncode}: {command}")
        return None

    return output.decode("utf-8", errors="replace").strip()


def run_checked(
    args: Sequence[str],
    cwd: Optional[PathLike] = None,
    timeout: int = DEFAULT_TIMEOUT_SEC,
) -> str:
    """
    Runs an external command that must succeed.

    Returns:
        The trimmed standard output.

    Raises:
        ExternalCommandError: If the command cannot be run or exits non-zero.
    """
    logger.debug(f"Running: {' '.join(args)}")
    try:
        result = subprocess.run(
            list(args),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
        )
    except FileNotFoundError:
        raise ExternalCommandError(args, f"{args[0]} is not installed or not in PATH.")
    except subprocess.TimeoutExpired:
        raise ExternalCommandError(args, f"timed out after {timeout}s")
    except OSError as e:
        raise ExternalCommandError(args, str(e)) from e

    if result.returncode != 0:
        raise ExternalCommandError(args, (result.stderr or "").strip())
    return (result.stdout or "").strip()


def find_git_root(start_dir: Optional[PathLike] = None) -> Optional[Path]:
    """
    Finds the repository root by searching upwards for a .git entry.

    A .git file (linked worktree or submodule) counts as well as a directory.
    """
    d = Path(start_dir or os.getcwd()).resolve()
    while True:
        if (d / ".git").exists():
            return d
        if d == d.parent:
            return None
        d = d.parent


def ref_exists(ref: str, cwd: PathLike) -> bool:
    """Checks whether a ref resolves in the repository at cwd."""
    return run_command(["git", "rev-parse", "--verify", "--quiet", ref], cwd=cwd) is not None


def get_current_branch_name(cwd: PathLike) -> str:
    """Gets the current branch name, or an empty string on a detached HEAD."""
    return run_command(["git", "branch", "--show-current"], cwd=cwd) or ""


def get_commit_log(target: str, cwd: PathLike) -> str:
    """One line per commit in target..HEAD, most recent first."""
    return run_command(["git", "log", f"{target}..HEAD", "--oneline"], cwd=cwd) or ""


def get_commit_messages(target: str, cwd: PathLike) -> str:
    """Subject and body of every commit in target..HEAD."""
    return run_command(
        ["git", "log", f"{target}..HEAD", "--pretty=format:### %s%n%b"], cwd=cwd
    ) or ""


def get_diff_stat(target: str, cwd: PathLike) -> str:
    return run_command(["git", "diff", target, "--stat"], cwd=cwd) or ""


def get_diff(target: str, cwd: PathLike) -> str:
    return run_command(["git", "diff", target], cwd=cwd) or ""


def push_branch(branch: str, cwd: PathLike, remote: str = "origin") -> bool:
    """
    Pushes a branch and sets its upstream.

    Returns:
        True if the push succeeded. A failed push is logged, not raised,
        since the branch is often already on the remote.
    """
    try:
        run_checked(["git", "push", "-u", remote, branch], cwd=cwd)
        return True
    except ExternalCommandError as e:
        logger.warning(f"Push of '{branch}' failed, assuming it is already pushed: {e.stderr}")
        return False
