"""Domain entity — the customer a project belongs to."""

from dataclasses import dataclass


@dataclass
class Customer:
    id: str
    name: str
    email: str = ""
    company_name: str | None = None
    total_revenue: float = 0.0
    order_count: int = 0
