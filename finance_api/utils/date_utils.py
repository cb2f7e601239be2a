"""Date manipulation utilities"""

import time
import uuid
from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta


def add_months(start: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the last day of short months"""
    return start + relativedelta(months=months)


def generate_month_range(start: date, count: int) -> List[date]:
    """Generate ``count`` monthly dates, each offset from ``start`` (not chained)"""
    return [add_months(start, i) for i in range(count)]


def new_group_token() -> str:
    """Opaque, timestamp-prefixed token unique per call"""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"
