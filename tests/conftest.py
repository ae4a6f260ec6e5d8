# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from packtrack.models.order import Order, OrderStatus


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        # keep developer .env / environment out of the tests
        for var in ("PACKTRACK_STATE_DIR", "PACKTRACK_EXPORT_DIR", "PACKTRACK_LOGS_DIR"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture()
def single_header_csv() -> str:
    return (
        "Timestamp,Name,Pickup or Delivery,Items\n"
        "01/02/2024 10:00:00,Alice Smith,Pickup,\"Poster, Photobook\"\n"
        "01/02/2024 11:30:00,Bob,Delivery,Cheki\n"
        "02/02/2024 09:15:00,Carol Smith,Delivery,\"Solo\nPoster\"\n"
    )


@pytest.fixture()
def double_header_csv() -> str:
    return (
        "Timestamp,Order,,\n"
        ",,Postage,Payment Proof\n"
        "03/02/2024 08:00:00,Mygo set,RM8,https://drive.google.com/open?id=1\n"
        "03/02/2024 09:00:00,Asuka set,RM10,\n"
    )


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def make_order() -> Callable[..., Order]:
    def _make(
        order_id: int,
        row: list[str],
        header: tuple[str, ...] | None = None,
        status: OrderStatus = OrderStatus.PENDING,
        notes: str = "",
    ) -> Order:
        header = header if header is not None else tuple(f"c{i}" for i in range(len(row)))
        return Order(id=order_id, row_data=tuple(row), headers=header, status=status, notes=notes)
    return _make
