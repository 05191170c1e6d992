"""
Excel Order Ledger with Concurrency Control

Process-safe Excel operations for:
- Appending each new order to the ledger file (Celery task)
- Building an in-memory workbook of all orders (admin export)

Version: 1.0.0
"""

import io
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

import pandas as pd
from filelock import FileLock, Timeout

from foodmenu.core.config import get_settings
from foodmenu.schemas import Order

logger = logging.getLogger(__name__)


class ExcelManager:
    """Process-safe Excel ledger manager."""

    ORDER_COLUMNS = [
        "order_id",
        "date_time",
        "restaurant_id",
        "customer_name",
        "customer_phone",
        "customer_email",
        "pickup_time",
        "items",
        "item_count",
        "total_amount",
        "order_status",
        "exported_at",
    ]

    @staticmethod
    def _ledger_path(file_path: Optional[Path] = None) -> Path:
        return Path(file_path) if file_path else get_settings().excel_path

    @staticmethod
    def _lock_for(file_path: Path) -> FileLock:
        return FileLock(f"{file_path}.lock", timeout=get_settings().excel_lock_timeout)

    @classmethod
    def _ensure_data_dir(cls, file_path: Path) -> None:
        """Create data directory if needed."""
        if not file_path.parent.exists():
            file_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {file_path.parent}")

    @classmethod
    def _load_or_create_df(cls, file_path: Path) -> pd.DataFrame:
        """Load existing file or create new DataFrame."""
        if file_path.exists():
            try:
                return pd.read_excel(file_path, engine="openpyxl")
            except Exception as e:
                logger.warning(f"Error reading {file_path}: {e}")
        return pd.DataFrame(columns=cls.ORDER_COLUMNS)

    @staticmethod
    def summarize_items(items: Iterable[dict[str, Any]]) -> str:
        """'CLASSIC BURGER x2, CAPPUCCINO x1'"""
        return ", ".join(f"{item.get('name')} x{item.get('quantity')}" for item in items)

    @classmethod
    def order_to_row(cls, order_data: dict[str, Any], exported_at: Optional[str] = None) -> dict[str, Any]:
        """Flatten a JSON-mode order dict into one ledger row."""
        items = order_data.get("items") or []
        return {
            "order_id": order_data.get("id"),
            "date_time": order_data.get("created_at"),
            "restaurant_id": order_data.get("restaurant_id"),
            "customer_name": order_data.get("customer_name"),
            "customer_phone": order_data.get("customer_phone"),
            "customer_email": order_data.get("customer_email"),
            "pickup_time": order_data.get("pickup_time"),
            "items": cls.summarize_items(items),
            "item_count": sum(int(item.get("quantity", 0)) for item in items),
            "total_amount": order_data.get("total_amount"),
            "order_status": order_data.get("status"),
            "exported_at": exported_at,
        }

    @classmethod
    def export_order(cls, order_data: dict[str, Any], file_path: Optional[Path] = None) -> dict[str, Any]:
        """Append one order to the ledger with file locking."""
        path = cls._ledger_path(file_path)
        cls._ensure_data_dir(path)

        order_id = order_data.get("id", "unknown")
        result = {
            "success": False,
            "message": "",
            "order_id": order_id,
            "exported_at": None,
        }

        lock = cls._lock_for(path)
        try:
            with lock:
                logger.debug(f"Lock acquired for Order #{order_id}")

                df = cls._load_or_create_df(path)

                # Redelivered tasks must not append the same order twice
                if "order_id" in df and str(order_id) in set(df["order_id"].astype(str)):
                    logger.info(f"Order #{order_id} already in ledger, skipping")
                    result["success"] = True
                    result["message"] = f"Order #{order_id} already exported"
                    return result

                export_time = datetime.now(timezone.utc).isoformat()
                new_row = cls.order_to_row(order_data, exported_at=export_time)

                df = pd.concat([df, pd.DataFrame([new_row], columns=cls.ORDER_COLUMNS)], ignore_index=True)
                df.to_excel(str(path), index=False, engine="openpyxl")

                logger.info(f"Order #{order_id} exported to Excel")

                result["success"] = True
                result["message"] = f"Order #{order_id} exported"
                result["exported_at"] = export_time

            logger.debug(f"Lock released for Order #{order_id}")

        except Timeout:
            result["message"] = f"Lock timeout ({lock.timeout}s)"
            logger.error(f"Lock timeout for Order #{order_id}")

        except Exception as e:
            result["message"] = str(e)
            logger.exception(f"Error exporting Order #{order_id}")

        return result

    @classmethod
    def get_all_orders(cls, file_path: Optional[Path] = None) -> list[dict[str, Any]]:
        """Get all ledger rows."""
        path = cls._ledger_path(file_path)

        if not path.exists():
            return []

        try:
            with cls._lock_for(path):
                df = pd.read_excel(path, engine="openpyxl")
            return df.to_dict("records")
        except Exception as e:
            logger.error(f"Error reading orders: {e}")
            return []

    @classmethod
    def clear_all(cls, file_path: Optional[Path] = None) -> bool:
        """Delete the ledger file."""
        path = cls._ledger_path(file_path)
        try:
            for f in [path, Path(f"{path}.lock")]:
                if f.exists():
                    f.unlink()
            logger.info("Excel ledger cleared")
            return True
        except OSError as e:
            logger.error(f"Error clearing ledger: {e}")
            return False

    @classmethod
    def build_orders_workbook(cls, orders: list[Order]) -> bytes:
        """Render ``orders`` as an .xlsx document in memory."""
        rows = [cls.order_to_row(order.model_dump(mode="json")) for order in orders]
        df = pd.DataFrame(rows, columns=cls.ORDER_COLUMNS).drop(columns=["exported_at"])

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Orders")
        return buffer.getvalue()
