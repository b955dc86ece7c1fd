"""Subprocess runner — the single mock seam for all tests."""

import os
import select
import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO

from flow_shell import config, log
from flow_shell.buffer import StreamBuffer
from flow_shell.output import ShellError, aggregate, decode
from flow_shell.sink import Sink

NO_PATH_MESSAGE = b"No Global Path Found"
SPAWN_FAILED_STATUS = 127
CHUNK_SIZE = 64 * 1024
POLL_INTERVAL = 0.05


def escape_spaces(path: str) -> str:
    return path.replace(" ", "\\ ")


def _drain(
    stream: BinaryIO, buffer: StreamBuffer, sink: Sink | None, exited: threading.Event
) -> None:
    """Copy chunks from a child stream into its buffer.

    Stops at EOF, or once the child has exited and the pipe is empty, so a
    backgrounded grandchild holding the pipe open does not keep us here.
    A failing sink stops receiving chunks, but the stream is still drained
    so the child never blocks on a full pipe; the error is raised at the end.
    """
    sink_error = None
    fd = stream.fileno()
    with stream:
        while True:
            # Checked before polling: once set, everything the child wrote
            # is already in the pipe.
            done = exited.is_set()
            readable, _, _ = select.select([fd], [], [], 0 if done else POLL_INTERVAL)
            if not readable:
                if done:
                    break
                continue
            chunk = os.read(fd, CHUNK_SIZE)
            if not chunk:
                break
            buffer.append(chunk)
            if sink is None or sink_error is not None:
                continue
            try:
                sink.write(chunk)
            except (OSError, ValueError) as e:
                sink_error = e
    if sink_error is not None:
        raise sink_error


def run(
    command: str,
    verbose: int = 0,
    cwd: str | None = None,
    output_sink: Sink | None = None,
    capture_stderr: bool = False,
    error_sink: Sink | None = None,
) -> str:
    """Run a shell command in cwd (or the default path) and return its stdout.

    stdout is always captured; stderr only when capture_stderr is set,
    otherwise the child inherits ours. Sinks receive each chunk as it
    arrives. Raises ShellError on a non-zero exit, carrying both streams,
    and with status 127 when the shell itself cannot be started.
    """
    launch_path = cwd or config.default_path()
    if launch_path is None:
        raise ShellError(1, NO_PATH_MESSAGE, NO_PATH_MESSAGE)

    final_command = f"cd {escape_spaces(launch_path)} && {command}"
    if verbose > 0:
        log.command(command)

    # One lock for both buffers: the drainers serialize through it.
    lock = threading.Lock()
    output_buffer = StreamBuffer(lock)
    error_buffer = StreamBuffer(lock)
    exited = threading.Event()
    shell = config.resolve_shell()

    try:
        try:
            proc = subprocess.Popen(
                [shell, "-c", final_command],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE if capture_stderr else None,
            )
        except OSError as e:
            raise ShellError(SPAWN_FAILED_STATUS, f"{shell}: {e.strerror}".encode(), b"") from e

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="flow-shell-drain") as pool:
            drainers = [pool.submit(_drain, proc.stdout, output_buffer, output_sink, exited)]
            if capture_stderr:
                drainers.append(
                    pool.submit(_drain, proc.stderr, error_buffer, error_sink, exited)
                )

            try:
                status = proc.wait()
            finally:
                exited.set()
            # Barrier: every chunk the child wrote is in its buffer.
            for drainer in drainers:
                drainer.result()
    finally:
        for sink in (output_sink, error_sink):
            if sink is not None:
                sink.close()

    output_data = output_buffer.snapshot()
    error_data = error_buffer.snapshot()

    if status != 0 and verbose > 0:
        log.failure(f"Failed: {decode(output_data)}")
    result = aggregate(status, output_data, error_data)
    if verbose > 0 and result:
        log.output(result)
    return result
