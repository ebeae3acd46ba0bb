import itertools
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

LineSink = Callable[[str], None]


class RunLog:
    """Textual narration of one run.

    Lines are kept in order and pushed to every subscriber as they are
    written, so a caller can show progress while the run is going.
    """

    def __init__(self, sink: Optional[LineSink] = None):
        self.lines: List[str] = []
        self._sinks: List[LineSink] = []
        if sink is not None:
            self.subscribe(sink)

    def subscribe(self, sink: LineSink):
        self._sinks.append(sink)

    def write(self, line: str = ""):
        for part in line.split("\n"):
            self.lines.append(part)
            for sink in self._sinks:
                sink(part)

    def rule(self, char: str = "=", width: int = 60):
        self.write(char * width)

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"


class LogFileStore:
    DEFAULT_DIR = Path.home() / ".batchpick" / "logs"
    FILE_PREFIX = "batch-cherry-pick"
    TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

    def __init__(self, dir: Optional[str] = None):
        self.path = Path(dir).expanduser() if dir else self.DEFAULT_DIR

    def log_path(self, when: datetime) -> Path:
        return self.path / f"{self.FILE_PREFIX}-{when.strftime(self.TIMESTAMP_FORMAT)}.log"

    def save(self, run_log: RunLog, when: Optional[datetime] = None) -> Path:
        """Write the log to a new file; runs in the same second get a -1, -2, ... suffix."""
        self.path.mkdir(parents=True, exist_ok=True)
        base = self.log_path(when or datetime.now())
        file_path = base
        for n in itertools.count(1):
            try:
                with open(file_path, "x", encoding="utf-8") as f:
                    f.write(run_log.text)
                return file_path
            except FileExistsError:
                file_path = base.with_name(f"{base.stem}-{n}{base.suffix}")
