"""
Excel Ledger Verification Script

Verifies data integrity of the Excel order ledger written by the worker.
Run from project root: python scripts/verify.py

Version: 1.0.0
"""

import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd

from foodmenu.core.config import get_settings
from foodmenu.services.excel_manager import ExcelManager


def verify_excel() -> bool:
    """Verify ledger integrity after a simulation run."""
    excel_file = get_settings().excel_path

    print("=" * 60)
    print("🔍 EXCEL VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"📄 File: {excel_file}")
    print("=" * 60)

    if not excel_file.exists():
        print("\n❌ Excel file not found!")
        print("   Run the simulation first: python scripts/simulate.py")
        return False

    df = pd.DataFrame(ExcelManager.get_all_orders(excel_file))
    if df.empty:
        print("\n⚠️ Ledger is empty or unreadable")
        return False
    print("\n✅ File loaded successfully!")

    print("\n📊 STATISTICS:")
    print(f"   Total Orders: {len(df)}")
    print(f"   Columns: {len(df.columns)}")

    missing = [col for col in ExcelManager.ORDER_COLUMNS if col not in df.columns]
    if missing:
        print(f"\n⚠️ Missing Columns: {missing}")
    else:
        print("\n✅ All ledger columns present")

    duplicates = df["order_id"].duplicated().sum() if "order_id" in df.columns else 0
    if duplicates > 0:
        print(f"\n⚠️ {duplicates} duplicate order IDs found!")
    else:
        print("✅ No duplicate order IDs")

    if "total_amount" in df.columns:
        print("\n💰 REVENUE:")
        print(f"   Total: {df['total_amount'].sum():.2f}")
        print(f"   Average: {df['total_amount'].mean():.2f}")

    if "restaurant_id" in df.columns:
        print("\n🏪 ORDERS PER RESTAURANT:")
        for restaurant_id, count in df["restaurant_id"].value_counts().items():
            print(f"   {restaurant_id}: {count}")

    print("\n📋 RECENT ORDERS:")
    print("-" * 60)
    cols = [c for c in ["order_id", "customer_name", "total_amount", "order_status"] if c in df.columns]
    print(df[cols].tail(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE")
    print("=" * 60)

    return duplicates == 0 and not missing


if __name__ == "__main__":
    sys.exit(0 if verify_excel() else 1)
