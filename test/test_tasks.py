import pytest

from foodmenu.celery_worker import celery_app
from foodmenu.services.excel_manager import ExcelManager
from foodmenu.tasks import LedgerExportError, export_order_to_excel, health_check

ORDER_DATA = {
    "id": "task-order",
    "restaurant_id": "north",
    "customer_name": "Elena Morozova",
    "total_amount": 270,
    "status": "new",
    "created_at": "2026-10-19T10:00:00Z",
    "items": [{"product_id": "latte", "name": "CARAMEL LATTE", "price": 270, "quantity": 1}],
}


def test_export_task_writes_ledger(tmp_path, monkeypatch):
    ledger = tmp_path / "orders.xlsx"
    export = ExcelManager.export_order.__func__
    monkeypatch.setattr(ExcelManager, "export_order", classmethod(lambda cls, data: export(cls, data, ledger)))

    result = export_order_to_excel.apply(args=[ORDER_DATA]).get()

    assert result["success"] is True
    assert result["order_id"] == "task-order"
    assert "processing_time_seconds" in result
    assert [row["order_id"] for row in ExcelManager.get_all_orders(ledger)] == ["task-order"]


def test_export_task_raises_for_retry(monkeypatch):
    monkeypatch.setattr(
        ExcelManager,
        "export_order",
        classmethod(lambda cls, data: {"success": False, "message": "Lock timeout (30s)", "order_id": data["id"]}),
    )

    with pytest.raises(LedgerExportError):
        export_order_to_excel.run(ORDER_DATA)


def test_health_check_task():
    assert health_check.run()["status"] == "healthy"


def test_redelivered_export_writes_one_row(tmp_path, monkeypatch):
    ledger = tmp_path / "orders.xlsx"
    export = ExcelManager.export_order.__func__
    monkeypatch.setattr(ExcelManager, "export_order", classmethod(lambda cls, data: export(cls, data, ledger)))

    export_order_to_excel.apply(args=[ORDER_DATA]).get()
    result = export_order_to_excel.apply(args=[ORDER_DATA]).get()

    assert result["success"] is True
    assert len(ExcelManager.get_all_orders(ledger)) == 1


def test_worker_config():
    conf = celery_app.conf

    assert conf.task_serializer == "json"
    assert conf.worker_prefetch_multiplier == 1
    assert conf.task_acks_late is True
    assert conf.enable_utc is True
