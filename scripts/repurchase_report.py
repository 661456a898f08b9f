#!/usr/bin/env python3
"""
Repurchase Report

Lists clients whose last purchase is older than the repurchase window, most
recently lapsed first, so they can be contacted again.

Usage:
    python repurchase_report.py
    python repurchase_report.py --days 45
    python repurchase_report.py --as-of 2025-06-30
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from repositories.sale_repository import list_sales
from services.repurchase_service import DEFAULT_THRESHOLD_DAYS, detect_repurchase_candidates


def main() -> int:
    parser = argparse.ArgumentParser(description="List clients due for a repurchase contact")
    parser.add_argument(
        "--days",
        type=int,
        default=DEFAULT_THRESHOLD_DAYS,
        help=f"Days since last purchase (default: {DEFAULT_THRESHOLD_DAYS})"
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Reference date (default: today)"
    )
    args = parser.parse_args()

    today = args.as_of or date.today()

    try:
        candidates = detect_repurchase_candidates(list_sales(), today, args.days)
    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1

    print(f"Clients with no purchase in the last {args.days} days (as of {today.isoformat()}):")
    print()

    if not candidates:
        print("  (none)")
        return 0

    print(f"  {'Client':<30} {'Last product':<30} {'Last sale':<12} {'Days':>5}")
    print(f"  {'-' * 30} {'-' * 30} {'-' * 12} {'-' * 5}")
    for c in candidates:
        print(f"  {c.client_name[:30]:<30} {c.product_name[:30]:<30} {c.last_sale_date.isoformat():<12} {c.days_since:>5}")

    print()
    print(f"Total: {len(candidates)} client(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
