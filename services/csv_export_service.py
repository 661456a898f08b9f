"""
CSV export service for sales.

Generates a CSV of sales with their full economics (gross amount, deductions
and net profit), in the order given.

Security:
- CSV Injection Prevention: text fields are sanitized to prevent formula
  execution when the file is opened in a spreadsheet
- Security Logging: a warning is logged whenever dangerous characters are
  stripped
"""

from __future__ import annotations

import csv
import logging
from io import StringIO
from typing import Iterable, List

from domain.sale import Sale

logger = logging.getLogger(__name__)

CSV_COLUMNS: List[str] = [
    "Sale ID",
    "Date",
    "Client",
    "Product",
    "Channel",
    "Status",
    "Amount",
    "Discount",
    "Commission Rate",
    "Commission",
    "Cost",
    "Freight",
    "Ad Cost",
    "Net Profit",
]


def sanitize_csv_field(value: str | None, field_name: str = "unknown") -> str:
    """
    Sanitize field to prevent CSV injection attacks with security logging.

    Strips leading characters that can trigger formula execution in
    Excel/Sheets: =, +, -, @, tab, carriage return

    Args:
        value: Field value to sanitize
        field_name: Name of the field being sanitized (for logging)

    Returns:
        Sanitized string safe for CSV export

    Example:
        sanitize_csv_field("=HYPERLINK(...)", "client_name")
        # Returns "HYPERLINK(...)" and logs a warning about the stripped "="

        sanitize_csv_field("Maria Silva", "client_name")
        # Returns "Maria Silva" (unchanged, no logging)
    """
    if value is None or value == "":
        return ""

    text = str(value).strip()
    original_text = text
    dangerous_chars = {'=', '+', '-', '@', '\t', '\r'}

    stripped_chars = []
    while text and text[0] in dangerous_chars:
        stripped_chars.append(text[0])
        text = text[1:]

    if stripped_chars:
        logger.warning(
            f"CSV injection character(s) stripped from field '{field_name}'",
            extra={
                "field_name": field_name,
                "stripped_characters": "".join(stripped_chars),
                "original_value": original_text[:100],
                "sanitized_value": text[:100],
                "modification_type": "csv_injection_prevention",
            },
        )

    return text


def sale_to_csv_row(sale: Sale) -> List[str]:
    """
    Convert a Sale to a CSV row in CSV_COLUMNS order.

    Money columns are written as plain decimals (a loss keeps its minus sign);
    only free-text columns are sanitized.
    """
    return [
        sanitize_csv_field(sale.sale_id, "sale_id"),
        sale.sale_date.isoformat(),
        sanitize_csv_field(sale.client_name, "client_name"),
        sanitize_csv_field(sale.product_name, "product_name"),
        sale.channel.value if sale.channel is not None else "",
        sale.status.value,
        str(sale.amount),
        str(sale.discount),
        str(sale.commission_rate),
        str(sale.commission_value),
        str(sale.cost),
        str(sale.freight),
        str(sale.ad_cost),
        str(sale.net_profit),
    ]


def generate_sales_csv(sales: Iterable[Sale]) -> str:
    """
    Generate CSV content for the given sales.

    Returns:
        CSV content as a string (header only for an empty input)

    Example:
        csv_content = generate_sales_csv(filter_sales(sales, filters))

        # Or return in API response
        return Response(content=csv_content, media_type="text/csv")
    """
    output = StringIO()
    writer = csv.writer(output)

    writer.writerow(CSV_COLUMNS)
    for sale in sales:
        writer.writerow(sale_to_csv_row(sale))

    return output.getvalue()


__all__ = [
    "CSV_COLUMNS",
    "generate_sales_csv",
    "sale_to_csv_row",
    "sanitize_csv_field",
]
