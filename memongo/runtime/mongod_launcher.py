"""
mongod process launcher.

Starts mongod configured for ephemeral storage and exposes its output as a
sequential line source with a startup deadline.
"""

import logging
import os
import queue
import shutil
import subprocess
import tempfile
import threading
import time
from typing import Iterator, List, Optional

import psutil

from memongo.errors import (
    ExecutableNotFoundError,
    ProcessStartError,
    StartupTimeoutError,
    WorkingDirectoryError,
)

logger = logging.getLogger(__name__)

MONGOD_BIN_ENV_VAR = "MEMONGO_MONGOD_BIN"
DEFAULT_STORAGE_ENGINE = "ephemeralForTest"

_EOF = object()


def find_mongod() -> Optional[str]:
    """
    Locate mongod from the environment.

    Returns:
        The value of MEMONGO_MONGOD_BIN if set, else mongod on PATH, else None
    """
    env_path = os.environ.get(MONGOD_BIN_ENV_VAR)
    if env_path:
        logger.debug(f"Using mongod from {MONGOD_BIN_ENV_VAR}: {env_path}")
        return env_path

    path = shutil.which("mongod")
    if path:
        logger.debug(f"Using mongod from PATH: {path}")
    return path


class MongodProcess:
    """
    A running mongod process.

    A daemon thread drains stdout for the whole life of the process: every
    line is logged at DEBUG, and while capture is active it is also queued
    for ``lines``. Draining continues after startup so mongod never blocks on
    a full pipe.
    """

    def __init__(self, popen: subprocess.Popen, args: List[str]):
        self._popen = popen
        self.args = args
        self._lines: "queue.Queue" = queue.Queue()
        self._capture_lock = threading.Lock()
        self._capturing = True
        self._reader = threading.Thread(
            target=self._read_output,
            name=f"mongod-output-{popen.pid}",
            daemon=True
        )
        self._reader.start()

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def returncode(self) -> Optional[int]:
        return self._popen.poll()

    def _read_output(self):
        stream = self._popen.stdout
        try:
            for raw_line in iter(stream.readline, ''):
                line = raw_line.rstrip('\r\n')
                logger.debug(f"[mongod {self.pid}] {line}")
                self._queue(line)
        except ValueError:
            # stdout closed underneath us
            pass
        finally:
            self._queue(_EOF)

    def _queue(self, item):
        with self._capture_lock:
            if self._capturing:
                self._lines.put(item)

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    def lines(self, timeout: Optional[float] = None) -> Iterator[str]:
        """
        Yield output lines in order until mongod closes its output.

        Args:
            timeout: Seconds from the first call until StartupTimeoutError

        Raises:
            StartupTimeoutError: If the deadline passes before end of stream
        """
        deadline = time.monotonic() + timeout if timeout is not None else None

        while True:
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise StartupTimeoutError(f"no verdict after {timeout} seconds")

            try:
                item = self._lines.get(timeout=remaining)
            except queue.Empty:
                raise StartupTimeoutError(f"no verdict after {timeout} seconds")

            if item is _EOF:
                return
            yield item

    def stop_capture(self):
        """Stop queueing output lines; output is still drained and logged."""
        with self._capture_lock:
            self._capturing = False
            while True:
                try:
                    self._lines.get_nowait()
                except queue.Empty:
                    break

    def is_running(self) -> bool:
        return self._popen.poll() is None

    def kill(self):
        """Kill mongod and any children immediately, without waiting for exit."""
        if self._popen.poll() is not None:
            # reaped already, the pid may have been reused
            logger.debug(f"mongod process {self.pid} already exited with code {self._popen.returncode}")
            return

        try:
            parent = psutil.Process(self.pid)
            children = parent.children(recursive=True)
        except psutil.NoSuchProcess:
            logger.debug(f"mongod process {self.pid} already gone")
            return

        for proc in children + [parent]:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass
        logger.info(f"Sent kill signal to mongod process {self.pid}")

    def wait(self, timeout: Optional[float] = None) -> int:
        """Wait for mongod to exit and return its exit code."""
        return self._popen.wait(timeout=timeout)


class MongodLauncher:
    """Resolves, configures and starts mongod processes."""

    def __init__(self, storage_engine: str = DEFAULT_STORAGE_ENGINE, extra_args: Optional[List[str]] = None):
        """
        Initialize MongodLauncher.

        Args:
            storage_engine: Value for mongod's --storageEngine flag
            extra_args: Additional arguments appended to every launch
        """
        self.storage_engine = storage_engine
        self.extra_args = list(extra_args or [])

    def resolve_executable(self, path: Optional[str]) -> str:
        """
        Check that the mongod executable exists.

        Raises:
            ExecutableNotFoundError: If path is empty or not a file
        """
        if not path or not os.path.isfile(path):
            raise ExecutableNotFoundError(path)
        return os.path.abspath(path)

    def create_working_dir(self, root: Optional[str] = None) -> str:
        """
        Create a fresh, uniquely named data directory.

        Raises:
            WorkingDirectoryError: If the directory cannot be created
        """
        try:
            if root:
                os.makedirs(root, exist_ok=True)
            path = tempfile.mkdtemp(prefix="memongo-", dir=root)
        except OSError as e:
            raise WorkingDirectoryError(f"cannot create temp dir: {e}") from e

        logger.debug(f"Created mongod working directory {path}")
        return path

    def build_args(self, executable: str, dbpath: str, port: int) -> List[str]:
        """Build the mongod command line."""
        return [
            executable,
            "--dbpath", dbpath,
            "--port", str(port),
            "--storageEngine", self.storage_engine,
            *self.extra_args,
        ]

    def launch(self, executable: str, dbpath: str, port: int) -> MongodProcess:
        """
        Start mongod with stdout piped (stderr merged into it).

        Raises:
            ExecutableNotFoundError: If the executable vanished before launch
            ProcessStartError: If the OS fails to start the process
        """
        args = self.build_args(executable, dbpath, port)
        logger.info(f"Starting mongod: {' '.join(args)}")

        try:
            popen = subprocess.Popen(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1
            )
        except FileNotFoundError as e:
            raise ExecutableNotFoundError(executable) from e
        except OSError as e:
            raise ProcessStartError(f"cannot start mongod {executable}: {e}") from e

        return MongodProcess(popen, args)
