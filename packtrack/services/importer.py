from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..csvio.reader import CsvSourceError, ParsedBatch, parse_source
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import TrackerConfig
from ..models.error_record import PARSE_ERROR, READ_ERROR, ImportErrorRecord
from ..models.import_result import ImportReport, SourceResult, SourceStatus
from ..store.order_store import OrderStore
from .progress import ProgressTracker

"""Import orchestration.

Sources are read and parsed concurrently, but the order store is only
touched once every source has settled (success or failure). Batches are then
applied in the order the sources were given, so ids do not depend on which
read finished first. A failing source never blocks the others; its message is
collected into the ImportReport and the JSON Lines error log.
"""

__all__ = [
    "READ_FAILED_MESSAGE",
    "read_source",
    "import_sources",
]

logger = logging.getLogger(__name__)

READ_FAILED_MESSAGE = "文件读取失败"


@dataclass(frozen=True)
class _Outcome:
    source: str
    batch: ParsedBatch | None = None
    error_type: str | None = None
    error: str | None = None
    detail: str | None = None  # extra text for the error log


def read_source(path: Path, encoding: str = "utf-8-sig") -> str:
    """Read one source as text (a leading UTF-8 BOM is dropped by utf-8-sig)."""
    return path.read_text(encoding=encoding)


def _load_one(path: Path, config: TrackerConfig) -> _Outcome:
    try:
        text = read_source(path, config.encoding)
    except (OSError, UnicodeDecodeError) as e:
        return _Outcome(path.name, error_type=READ_ERROR, error=READ_FAILED_MESSAGE, detail=str(e))
    try:
        batch = parse_source(text, config.header_rules)
    except CsvSourceError as e:
        return _Outcome(path.name, error_type=e.error_type, error=str(e))
    return _Outcome(path.name, batch=batch)


def _collect(paths: Sequence[Path], config: TrackerConfig, show_progress: bool) -> list[_Outcome]:
    """Run all source loads and wait until every one of them has settled."""
    outcomes: list[_Outcome | None] = [None] * len(paths)
    with ProgressTracker(len(paths), description="Importing", enabled=show_progress) as progress, \
            ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as pool:
        futures: dict[Future[_Outcome], int] = {
            pool.submit(_load_one, p, config): i for i, p in enumerate(paths)
        }
        for fut in as_completed(futures):
            idx = futures[fut]
            try:
                outcomes[idx] = fut.result()
            except Exception as e:  # unexpected parser failure stays local to the source
                outcomes[idx] = _Outcome(
                    paths[idx].name, error_type=PARSE_ERROR, error=f"解析失败: {e}"
                )
            progress.advance(paths[idx].name, success=outcomes[idx].batch is not None)
    return [o for o in outcomes if o is not None]


def import_sources(
    paths: Sequence[Path],
    store: OrderStore,
    config: TrackerConfig | None = None,
    *,
    error_log: ErrorLogBuffer | None = None,
    show_progress: bool = True,
) -> ImportReport:
    """Import CSV sources into ``store``.

    Args:
        paths: CSV files, applied in this order
        store: target order store (mutated only after all sources settle)
        config: tracker configuration (defaults when None)
        error_log: buffer for failure records; flushed once at the end
        show_progress: allow the tqdm progress bar (still TTY only)

    Returns:
        ImportReport with one SourceResult per path, in path order
    """
    config = config or TrackerConfig()
    error_log = error_log if error_log is not None else ErrorLogBuffer(Path(config.logs_directory))
    start_time = datetime.now(UTC)

    outcomes = _collect(list(paths), config, show_progress)

    results: list[SourceResult] = []
    for outcome in outcomes:
        if outcome.batch is None:
            logger.debug(f"{outcome.source}: failed ({outcome.error_type})")
            message = outcome.error or ""
            if outcome.detail:
                message = f"{message}: {outcome.detail}"
            error_log.append(
                ImportErrorRecord.create(
                    source=outcome.source,
                    row=-1,
                    error_type=outcome.error_type or PARSE_ERROR,
                    message=message,
                )
            )
            results.append(
                SourceResult(
                    source=outcome.source,
                    status=SourceStatus.FAILED,
                    error_type=outcome.error_type,
                    error=outcome.error,
                )
            )
            continue

        batch = outcome.batch
        created = store.import_batch(batch.rows, batch.header)
        if batch.ragged:
            shown = ", ".join(f"row {r} ({w} cols)" for r, w in batch.ragged[:5])
            logger.warning(
                f"{outcome.source}: {len(batch.ragged)} row(s) wider than header "
                f"({len(batch.header)} cols): {shown}"
            )
        logger.info(f"{outcome.source}: imported {len(created)} orders")
        results.append(
            SourceResult(
                source=outcome.source,
                status=SourceStatus.SUCCESS,
                imported_rows=len(created),
                columns=len(batch.header),
                ragged_rows=len(batch.ragged),
            )
        )

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    return ImportReport(start_time=start_time, end_time=datetime.now(UTC), sources=results)
