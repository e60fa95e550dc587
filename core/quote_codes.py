# core/quote_codes.py

import re
from datetime import date
from typing import Optional


QUOTE_CODE_PREFIX = "FOR-EKA-PRO-3_"
QUOTE_CODE_PATTERN = re.compile(r"FOR-EKA-PRO-3_(\d{4})-(\d{3})", re.IGNORECASE)

# ilike pattern used to find the latest code in the log
QUOTE_CODE_LIKE = f"{QUOTE_CODE_PREFIX}%"


def format_quote_code(year: int, seq: int) -> str:
    return f"{QUOTE_CODE_PREFIX}{year}-{seq:03d}"


def suggest_next_code(last_code: Optional[str], year: Optional[int] = None) -> str:
    """
    Next quotation code after `last_code`.

    The sequence restarts at 001 when the last code belongs to another
    year or does not follow the FOR-EKA-PRO-3_YYYY-NNN format.
    """
    if year is None:
        year = date.today().year

    if last_code:
        match = QUOTE_CODE_PATTERN.search(last_code)
        if match and int(match.group(1)) == year:
            return format_quote_code(year, int(match.group(2)) + 1)

    return format_quote_code(year, 1)


def latest_quote_code(client, table: str) -> Optional[str]:
    """Greatest code in the log (string order, as the UI always did)."""
    res = (
        client.table(table)
        .select("cotizacion")
        .ilike("cotizacion", QUOTE_CODE_LIKE)
        .order("cotizacion", desc=True)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    if not rows:
        return None
    return rows[0].get("cotizacion")
