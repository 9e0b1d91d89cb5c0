"""Debtor Domain Entity

Customers with outstanding balances, grouped by phone number.
"""

from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from pydantic import BaseModel, Field
from src.domain.sale import Sale


class Debtor(BaseModel):
    """
    Debtor - Customer owing money across one or more sales

    Domain Rules:
    - Keyed by customer phone (the till requires it for any balance due)
    - total_debt is the sum of positive balances only; overpaid sales do
      not offset debt elsewhere
    """

    customer_phone: str
    customer_name: str = ""
    total_debt: int = Field(..., description="Outstanding amount (cents)")
    outstanding_sales: int = 0
    sale_ids: List[int] = Field(default_factory=list)
    last_sale_date: Optional[datetime] = None

    class Config:
        frozen = True


def summarize_debtors(sales: Sequence[Sale]) -> List[Debtor]:
    """Group sales with a balance due by customer phone, largest debt first"""
    grouped: "OrderedDict[str, Dict]" = OrderedDict()

    for sale in sales:
        if sale.balance <= 0:
            continue
        phone = (sale.customer_phone or "").strip() or "unknown"
        entry = grouped.setdefault(
            phone,
            {"name": "", "debt": 0, "count": 0, "ids": [], "last": None},
        )
        entry["debt"] += sale.balance
        entry["count"] += 1
        if sale.id is not None:
            entry["ids"].append(sale.id)
        if sale.customer_name:
            entry["name"] = sale.customer_name
        if sale.sale_date and (entry["last"] is None or sale.sale_date > entry["last"]):
            entry["last"] = sale.sale_date

    debtors = [
        Debtor(
            customer_phone=phone,
            customer_name=entry["name"],
            total_debt=entry["debt"],
            outstanding_sales=entry["count"],
            sale_ids=entry["ids"],
            last_sale_date=entry["last"],
        )
        for phone, entry in grouped.items()
    ]
    return sorted(debtors, key=lambda d: d.total_debt, reverse=True)
