from __future__ import annotations

from ..models.import_result import ImportReport

"""SUMMARY line rendering for import runs."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(report: ImportReport) -> str:
    """Render the SUMMARY line of an import run.

    Format:
        SUMMARY sources={total}/{total} success={success} failed={failed} rows={rows} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> from packtrack.models.import_result import SourceResult, SourceStatus
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> report = ImportReport(start_time=t, end_time=t, sources=[
        ...     SourceResult("a.csv", SourceStatus.SUCCESS, imported_rows=3)])
        >>> render_summary_line(report)
        'SUMMARY sources=1/1 success=1 failed=0 rows=3 elapsed_sec=0'
    """
    total = report.total_sources
    return (
        f"SUMMARY sources={total}/{total} "
        f"success={report.success_sources} "
        f"failed={report.failed_sources} "
        f"rows={report.imported_rows} "
        f"elapsed_sec={_format_seconds(report.elapsed_seconds)}"
    )


def render_import_message(report: ImportReport) -> str:
    """Operator-facing import result text (Chinese, as shown after an import)."""
    if report.failed_sources == 0:
        return f"成功导入 {report.total_sources} 个文件，共 {report.imported_rows} 条订单！"
    lines = [
        f"导入完成。成功: {report.imported_rows} 条订单",
        f"失败: {report.failed_sources} 个文件",
        "",
        *report.failures,
    ]
    return "\n".join(lines)
