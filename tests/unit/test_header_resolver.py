from __future__ import annotations

import pytest

from packtrack.csvio.reader import (
    EmptySourceError,
    NoDataRowsError,
    parse_source,
    resolve_header,
)
from packtrack.models.config_models import HeaderRules


def test_two_row_header_is_merged():
    rows = [["Group", "", ""], ["", "Postage", "Proof"], ["01/02/2024", "x", "y"]]
    header, start = resolve_header(rows)
    assert header == ("Group", "Postage", "Proof")
    assert start == 2


def test_date_in_second_row_means_single_header():
    rows = [["Timestamp", "Name"], ["01/02/2024", "Alice"]]
    header, start = resolve_header(rows)
    assert header == ("Timestamp", "Name")
    assert start == 1


def test_marker_wins_over_date_pattern():
    rows = [["When", "Fee"], ["01/02/2024", "Postage fee"], ["02/02/2024", "8"]]
    header, start = resolve_header(rows)
    assert start == 2
    # no blank cells to fill, header unchanged
    assert header == ("When", "Fee")


def test_payment_proof_marker_is_case_insensitive():
    rows = [["A", ""], ["01/01/2024", "PAYMENT PROOF"], ["01/01/2024", "x"]]
    header, start = resolve_header(rows)
    assert header == ("A", "PAYMENT PROOF")
    assert start == 2


def test_non_blank_header_cells_are_not_overwritten():
    rows = [["Name", "  "], ["Other", "Phone"], ["01/01/2024", "1"]]
    header, start = resolve_header(rows)
    assert header == ("Name", "Phone")
    assert start == 2


def test_shorter_second_row_only_fills_available_cells():
    rows = [["A", "", ""], ["x"], ["01/01/2024", "1", "2"]]
    header, _ = resolve_header(rows)
    assert header == ("A", "", "")


def test_date_pattern_is_anchored_at_start():
    rows = [["T", "N"], ["on 01/02/2024", "Alice"]]
    _, start = resolve_header(rows)
    assert start == 2


def test_date_with_time_suffix_counts_as_data():
    rows = [["T", "N"], ["01/02/2024 10:11:12", "Alice"]]
    _, start = resolve_header(rows)
    assert start == 1


def test_fewer_than_two_rows_yields_empty_result():
    assert resolve_header([]) == ((), 0)
    assert resolve_header([["only", "header"]]) == ((), 0)


def test_custom_rules():
    rules = HeaderRules(markers=("shipping",), date_pattern=r"^\d{4}-\d{2}-\d{2}")
    rows = [["T", "N"], ["2024-01-02", "Alice"]]
    assert resolve_header(rows, rules)[1] == 1
    rows = [["T", ""], ["2024-01-02", "Shipping"]]
    assert resolve_header(rows, rules) == (("T", "Shipping"), 2)


def test_parse_source_pipeline(double_header_csv):
    batch = parse_source(double_header_csv)
    assert batch.header == ("Timestamp", "Order", "Postage", "Payment Proof")
    assert len(batch.rows) == 2
    assert batch.rows[1] == ["03/02/2024 09:00:00", "Asuka set", "RM10", ""]
    assert batch.ragged == []


def test_parse_source_empty_text():
    with pytest.raises(EmptySourceError):
        parse_source("  \n ")


def test_parse_source_header_only():
    with pytest.raises(NoDataRowsError):
        parse_source("Timestamp,Name\n")


def test_parse_source_two_header_rows_without_data():
    with pytest.raises(NoDataRowsError) as e:
        parse_source("Timestamp,\n,Postage\n")
    assert str(e.value) == "没有找到有效的数据行"
