"""Background execution of a batch job.

A job runs on one worker thread; the calling thread stays free to render
the log lines the job produces. There is exactly one worker per job, and
the job itself processes its items one at a time.
"""

import queue
import threading
from typing import Any, Callable, Optional

from .run_log import RunLog

_DONE = object()


class BatchWorker:
    """Run a job on a background thread and stream its log lines.

    Example:
        worker = BatchWorker(lambda run_log: orchestrator.run(lines, branch, ws, run_log))
        summary = worker.run(on_line=click.echo)
    """

    def __init__(self, job: Callable[[RunLog], Any], name: str = "batchpick-worker"):
        self.job = job
        self.name = name
        self.run_log = RunLog()
        self._lines: "queue.Queue[object]" = queue.Queue()
        self._result: Any = None
        self._error: Optional[BaseException] = None

    def _target(self):
        try:
            self._result = self.job(self.run_log)
        except BaseException as e:
            self._error = e
        finally:
            self._lines.put(_DONE)

    def run(self, on_line: Optional[Callable[[str], None]] = None) -> Any:
        """Start the job, forward each log line to on_line, and wait for it.

        Returns:
            Whatever the job returned.

        Raises:
            Whatever the job raised, re-raised in the calling thread.
        """
        self.run_log.subscribe(self._lines.put)
        thread = threading.Thread(target=self._target, name=self.name, daemon=True)
        thread.start()

        while True:
            line = self._lines.get()
            if line is _DONE:
                break
            if on_line is not None:
                on_line(line)

        thread.join()
        if self._error is not None:
            raise self._error
        return self._result
