#!/usr/bin/env python3
"""
Sales Export Script

Exports sales from the Supabase database to CSV, with the same filters as the
dashboard, and prints the summary totals of the exported set.

Usage:
    python export_sales.py --output sales.csv
    python export_sales.py --start 2025-03-01 --end 2025-03-31 --output march.csv
    python export_sales.py --sale-type Referral --search maria --output maria.csv
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.channel import SaleChannel
from repositories.sale_repository import list_sales
from services.aggregation_service import ALL_CHANNELS, SalesFilter, filter_sales, summarize_sales
from services.csv_export_service import generate_sales_csv


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Export sales from Supabase database to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Export all sales
  python export_sales.py --output all_sales.csv

  # Export one month
  python export_sales.py --start 2025-03-01 --end 2025-03-31 --output march.csv

  # Export paid-traffic sales of one product
  python export_sales.py --sale-type Paid-Traffic --product "Vitamin C Serum" -o serum.csv
        """
    )

    parser.add_argument("--output", "-o", required=True, help="Path to output CSV file")
    parser.add_argument("--start", type=date.fromisoformat, help="Inclusive start date (YYYY-MM-DD)")
    parser.add_argument("--end", type=date.fromisoformat, help="Inclusive end date (YYYY-MM-DD)")
    parser.add_argument(
        "--sale-type",
        choices=[ALL_CHANNELS] + [c.value for c in SaleChannel],
        default=ALL_CHANNELS,
        help="Filter by channel"
    )
    parser.add_argument("--product", help="Exact product name")
    parser.add_argument("--search", "-s", help="Substring of client or product name")

    args = parser.parse_args()

    filters = SalesFilter(
        start_date=args.start,
        end_date=args.end,
        channel=args.sale_type,
        product_name=args.product,
        search_term=args.search,
    )

    try:
        print("Fetching sales from database...")
        sales = filter_sales(list_sales(), filters)

        if not sales:
            print("No sales found matching the specified filters")
            return 1

        with open(args.output, "w", newline="", encoding="utf-8") as f:
            f.write(generate_sales_csv(sales))

        summary = summarize_sales(sales)

        print()
        print("=" * 60)
        print("EXPORT SUMMARY")
        print("=" * 60)
        print(f"Sales exported:   {summary.sales_count}")
        print(f"Gross total:      {summary.total_sales:.2f}")
        print(f"Commission:       {summary.total_commission:.2f}")
        print(f"Freight:          {summary.total_freight:.2f}")
        print(f"Net profit:       {summary.total_net_profit:.2f}")
        print(f"Average ticket:   {summary.average_ticket:.2f}")
        print()
        print(f"Output file: {args.output}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\n\nExport interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
