"""
Bridge to the promtool command-line tool.

Commands are always built as argv lists and started with
asyncio.create_subprocess_exec, never through a shell, so metric names and
file paths reach promtool verbatim.
"""
import asyncio
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from promport.core.config import Settings
from promport.core.exceptions import (
    CommandExecutionError,
    OutputLimitExceeded,
    RequestValidationFailure,
)
from promport.utils.logger import get_logger

logger = get_logger("promport.promtool")

# Runtime, process and scrape housekeeping series exposed by Prometheus itself
EXCLUDED_PREFIXES = (
    "go_",
    "process_",
    "prometheus_",
    "promhttp_",
    "net_conntrack_",
    "scrape_",
)
UP_METRIC = "up"

DEFAULT_MAX_OUTPUT_BYTES = 100 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024


@dataclass
class CommandResult:
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class _OutputBudget:
    limit: int
    used: int = 0
    exceeded: bool = False

    def take(self, size: int) -> bool:
        self.used += size
        if self.used > self.limit:
            self.exceeded = True
        return not self.exceeded


def build_labels_command(promtool: str, prometheus_url: str) -> List[str]:
    return [promtool, "query", "labels", prometheus_url, "__name__"]


def build_match_selector(names: Sequence[str]) -> str:
    """Series selector matching any of ``names`` through a regex alternation."""
    return '{__name__=~"%s"}' % "|".join(names)


def build_dump_command(
    promtool: str,
    tsdb_path: str,
    names: Sequence[str],
    min_time: Optional[int] = None,
    max_time: Optional[int] = None,
) -> List[str]:
    argv = [promtool, "tsdb", "dump-openmetrics"]
    if min_time is not None:
        argv.append(f"--min-time={min_time}")
    if max_time is not None:
        argv.append(f"--max-time={max_time}")
    argv.extend(["--match", build_match_selector(names), tsdb_path])
    return argv


def build_import_command(promtool: str, input_path: str, tsdb_path: str) -> List[str]:
    return [promtool, "tsdb", "create-blocks-from", "openmetrics", input_path, tsdb_path]


def filter_metric_names(lines: Iterable[str]) -> List[str]:
    """
    Drop blank lines, Prometheus' own housekeeping metrics and ``up``.
    Order of first appearance is kept; duplicates are removed.
    """
    names: List[str] = []
    seen = set()
    for line in lines:
        name = line.strip()
        if not name or name == UP_METRIC or name.startswith(EXCLUDED_PREFIXES):
            continue
        if name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


async def _drain(stream: asyncio.StreamReader, budget: _OutputBudget, process) -> bytes:
    chunks = []
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        if budget.exceeded:
            continue
        if not budget.take(len(chunk)):
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
            continue
        chunks.append(chunk)
    return b"".join(chunks)


async def run_command(
    argv: Sequence[str],
    *,
    stdout_path: Optional[str] = None,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> CommandResult:
    """
    Run ``argv`` and wait for it to exit.

    With ``stdout_path`` the process writes its standard output straight into
    that file (created or truncated); otherwise it is captured. Everything
    captured counts against ``max_output_bytes``: once the ceiling is passed
    the process is killed and OutputLimitExceeded is raised. A non-zero exit
    raises CommandExecutionError carrying the captured stderr.
    """
    argv = [str(arg) for arg in argv]
    stdout_file = None
    try:
        if stdout_path is not None:
            try:
                stdout_file = open(stdout_path, "wb")
            except OSError as e:
                raise CommandExecutionError(
                    f"Cannot open output file {stdout_path}: {e.strerror or e}",
                    argv=argv,
                ) from e

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=stdout_file if stdout_file is not None else asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommandExecutionError(
                f"Failed to start {argv[0]}: {e.strerror or e}", argv=argv
            ) from e

        budget = _OutputBudget(max_output_bytes)
        if stdout_file is None:
            stdout, stderr = await asyncio.gather(
                _drain(process.stdout, budget, process),
                _drain(process.stderr, budget, process),
            )
        else:
            stdout = b""
            stderr = await _drain(process.stderr, budget, process)
        returncode = await process.wait()
    finally:
        if stdout_file is not None:
            stdout_file.close()

    if budget.exceeded:
        raise OutputLimitExceeded(argv, max_output_bytes)

    result = CommandResult(
        argv=argv,
        returncode=returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
    if not result.ok:
        raise CommandExecutionError(
            f"Command failed with exit code {returncode}",
            argv=argv,
            returncode=returncode,
            stderr=result.stderr,
        )
    return result


class Promtool:
    """promtool operations bound to one Settings instance."""

    def __init__(self, settings: Settings):
        self.settings = settings

    async def list_metric_names(self) -> List[str]:
        self.settings.require("PROMTOOL_PATH", "PROMETHEUS_URL")
        argv = build_labels_command(
            self.settings.PROMTOOL_PATH, self.settings.PROMETHEUS_URL
        )
        result = await self._run(argv)
        names = filter_metric_names(result.stdout.splitlines())
        logger.info(f"Fetched {len(names)} metric names from {self.settings.PROMETHEUS_URL}")
        return names

    async def export_range(
        self,
        output_path: Optional[str],
        names: Optional[Sequence[str]],
        min_time: Optional[int] = None,
        max_time: Optional[int] = None,
    ) -> CommandResult:
        if not output_path or not output_path.strip():
            raise RequestValidationFailure("Output path is required")
        selected = [name for name in (names or []) if name and name.strip()]
        if not selected:
            raise RequestValidationFailure("At least one metric must be selected")
        if min_time is not None and max_time is not None and min_time > max_time:
            raise RequestValidationFailure(
                "minTime must be less than or equal to maxTime"
            )

        self.settings.require("PROMTOOL_PATH", "TSDB_PATH")
        argv = build_dump_command(
            self.settings.PROMTOOL_PATH,
            self.settings.TSDB_PATH,
            selected,
            min_time=min_time,
            max_time=max_time,
        )
        result = await self._run(argv, stdout_path=output_path)
        logger.info(f"Exported {len(selected)} metric(s) to {output_path}")
        return result

    async def import_file(self, input_path: Optional[str]) -> CommandResult:
        if not input_path or not input_path.strip():
            raise RequestValidationFailure("Input path is required")

        self.settings.require("PROMTOOL_PATH", "TSDB_PATH")
        argv = build_import_command(
            self.settings.PROMTOOL_PATH, input_path, self.settings.TSDB_PATH
        )
        result = await self._run(argv)
        logger.info(f"Imported {input_path} into {self.settings.TSDB_PATH}")
        return result

    async def _run(self, argv: List[str], stdout_path: Optional[str] = None) -> CommandResult:
        logger.info(f"Running: {' '.join(argv)}")
        try:
            return await run_command(
                argv,
                stdout_path=stdout_path,
                max_output_bytes=self.settings.MAX_OUTPUT_BYTES,
            )
        except CommandExecutionError as e:
            logger.error(f"promtool failed: {e.message}")
            raise
