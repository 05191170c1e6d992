import io
from datetime import datetime, timezone

import pandas as pd

from foodmenu.schemas import Order, OrderItem
from foodmenu.services.excel_manager import ExcelManager


def _order_data(order_id: str = "o1", **overrides) -> dict:
    order = Order(
        id=order_id,
        restaurant_id="west",
        customer_name="Olga Volkova",
        customer_phone="+7 (903) 555-12-34",
        total_amount=740,
        items=[
            OrderItem(product_id="cappuccino", name="CAPPUCCINO", price=220, quantity=1),
            OrderItem(product_id="carbonara", name="PASTA CARBONARA", price=520, quantity=1),
        ],
        created_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )
    data = order.model_dump(mode="json")
    data.update(overrides)
    return data


def test_order_to_row():
    row = ExcelManager.order_to_row(_order_data(), exported_at="now")

    assert list(row) == ExcelManager.ORDER_COLUMNS
    assert row["order_id"] == "o1"
    assert row["items"] == "CAPPUCCINO x1, PASTA CARBONARA x1"
    assert row["item_count"] == 2
    assert row["order_status"] == "new"
    assert row["exported_at"] == "now"


def test_export_appends_rows(tmp_path):
    ledger = tmp_path / "ledger" / "orders.xlsx"

    first = ExcelManager.export_order(_order_data("o1"), ledger)
    second = ExcelManager.export_order(_order_data("o2", total_amount=100), ledger)

    assert first["success"] is True
    assert second["success"] is True
    assert second["order_id"] == "o2"
    assert ledger.exists()

    rows = ExcelManager.get_all_orders(ledger)
    assert [row["order_id"] for row in rows] == ["o1", "o2"]
    assert rows[1]["total_amount"] == 100
    assert rows[0]["customer_name"] == "Olga Volkova"


def test_export_skips_order_already_in_ledger(tmp_path):
    ledger = tmp_path / "orders.xlsx"
    ExcelManager.export_order(_order_data("o1"), ledger)

    again = ExcelManager.export_order(_order_data("o1"), ledger)

    assert again["success"] is True
    assert again["exported_at"] is None
    assert [row["order_id"] for row in ExcelManager.get_all_orders(ledger)] == ["o1"]


def test_missing_ledger_reads_empty(tmp_path):
    assert ExcelManager.get_all_orders(tmp_path / "nothing.xlsx") == []


def test_clear_all(tmp_path):
    ledger = tmp_path / "orders.xlsx"
    ExcelManager.export_order(_order_data(), ledger)

    assert ExcelManager.clear_all(ledger) is True
    assert not ledger.exists()
    assert ExcelManager.get_all_orders(ledger) == []


def test_build_orders_workbook():
    orders = [Order(**_order_data("o1")), Order(**_order_data("o2", status="ready"))]

    content = ExcelManager.build_orders_workbook(orders)

    assert content[:2] == b"PK"
    df = pd.read_excel(io.BytesIO(content), sheet_name="Orders", engine="openpyxl")
    assert list(df.columns) == [c for c in ExcelManager.ORDER_COLUMNS if c != "exported_at"]
    assert list(df["order_id"]) == ["o1", "o2"]
    assert list(df["order_status"]) == ["new", "ready"]


def test_build_empty_workbook():
    df = pd.read_excel(io.BytesIO(ExcelManager.build_orders_workbook([])), engine="openpyxl")
    assert df.empty
    assert "order_id" in df.columns
