"""Chronological ordering of commit references.

Cherry-picking in the order the commits were written avoids most
artificial conflicts. Lines that cannot be parsed, resolved or looked up
are dropped with a log note; the rest keep their relative order on equal
timestamps.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .backend import VcsBackend
from .models import TIME_FORMAT, SortedCommit, SortResult
from .project_resolver import resolve_project_dir
from .reference_parser import parse_commit_reference
from .run_log import RunLog

log = logging.getLogger(__name__)


class ChronologicalSorter:
    def __init__(self, backend: VcsBackend):
        self.backend = backend

    def sort(
        self,
        lines: List[str],
        workspace: Union[str, Path],
        run_log: Optional[RunLog] = None,
    ) -> SortResult:
        """Sort reference lines by the author time of their commits, oldest first.

        Args:
            lines: Reference lines in input order; blank lines are skipped.
            workspace: Parent directory holding one checkout per project.
            run_log: Receives a progress line per input line.

        Returns:
            SortResult whose records are the resolvable lines in ascending
            commit order and whose dropped list holds the rest.
        """
        run_log = run_log or RunLog()
        result = SortResult()

        run_log.write("=== Sorting Commit URLs by Time ===")
        run_log.write(f"Found {len(lines)} URLs to process")
        run_log.rule("=", 50)

        for index, line in enumerate(lines, start=1):
            raw_input = line.strip()
            if not raw_input:
                run_log.write(f"Skipping empty line {index}")
                continue

            run_log.write(f"Processing URL {index}: {raw_input}")
            record = self._lookup(raw_input, Path(workspace), run_log)
            if record is None:
                result.dropped.append(raw_input)
            else:
                result.records.append(record)

        # sorted() is stable, so equal timestamps keep input order
        result.records = sorted(result.records, key=lambda record: record.timestamp)
        self._write_results(run_log, result)
        return result

    def _lookup(
        self, raw_input: str, workspace: Path, run_log: RunLog
    ) -> Optional[SortedCommit]:
        reference = parse_commit_reference(raw_input)
        if reference is None:
            run_log.write("  [SKIP] Invalid URL format")
            return None
        run_log.write(
            f"  [OK] Parsed - Project: {reference.project_code}, Commit: {reference.commit_id}"
        )

        project_dir = resolve_project_dir(reference.project_code, workspace)
        if project_dir is None:
            run_log.write("  [SKIP] Project directory not found")
            return None
        run_log.write(f"  [OK] Found project directory: {project_dir.name}")

        info = self.backend.commit_timestamp_and_author(project_dir, reference.commit_id)
        if info is None:
            run_log.write("  [SKIP] Failed to get commit information")
            return None

        timestamp, author = info
        record = SortedCommit(
            raw_input=raw_input,
            commit_reference=reference,
            timestamp=timestamp,
            author=author,
        )
        run_log.write(f"  [OK] Commit time: {record.time_string}, Author: {author}")
        return record

    def _write_results(self, run_log: RunLog, result: SortResult):
        run_log.rule("=", 50)
        run_log.write("SORTING RESULTS")
        run_log.rule("=", 50)
        run_log.write(f"Successfully processed {len(result.records)} commits")
        if result.dropped:
            run_log.write(f"Dropped {len(result.dropped)} unresolvable URLs")
        run_log.write("Sorted by commit time (ascending order):")
        for number, record in enumerate(result.records, start=1):
            run_log.write(
                f"{number}. {record.time_string} | {record.author} | "
                f"{record.commit_reference.short_commit_id}"
            )
            run_log.write(f"   {record.raw_input}")
        run_log.rule("=", 50)
        run_log.write(f"Sort completed at: {datetime.now().strftime(TIME_FORMAT)}")
