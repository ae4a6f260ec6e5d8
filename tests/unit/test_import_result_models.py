from __future__ import annotations

from datetime import UTC, datetime

import pytest

from packtrack.models.import_result import ImportReport, SourceResult, SourceStatus

"""Unit tests for import result models."""


class TestSourceResult:

    def test_defaults(self):
        res = SourceResult("a.csv", SourceStatus.SUCCESS)
        assert res.imported_rows == 0
        assert res.columns == 0
        assert res.ragged_rows == 0
        assert res.failure_message is None

    def test_failure_message(self):
        res = SourceResult("b.csv", SourceStatus.FAILED, error_type="EMPTY_SOURCE", error="文件为空")
        assert res.failure_message == "b.csv: 文件为空"

    def test_immutable(self):
        res = SourceResult("a.csv", SourceStatus.SUCCESS)
        with pytest.raises(AttributeError):
            res.source = "other.csv"


class TestImportReport:

    def _report(self, *sources: SourceResult) -> ImportReport:
        start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=UTC)
        end = datetime(2024, 1, 1, 10, 0, 1, 500000, tzinfo=UTC)
        return ImportReport(start_time=start, end_time=end, sources=list(sources))

    def test_aggregates(self):
        report = self._report(
            SourceResult("a.csv", SourceStatus.SUCCESS, imported_rows=3),
            SourceResult("b.csv", SourceStatus.FAILED, error="文件为空"),
            SourceResult("c.csv", SourceStatus.SUCCESS, imported_rows=2),
        )
        assert report.total_sources == 3
        assert report.success_sources == 2
        assert report.failed_sources == 1
        assert report.imported_rows == 5
        assert report.elapsed_seconds == pytest.approx(1.5)
        assert report.failures == ["b.csv: 文件为空"]

    def test_empty_report(self):
        report = self._report()
        assert report.total_sources == 0
        assert report.imported_rows == 0
        assert report.failures == []
