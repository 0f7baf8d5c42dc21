"""Aggregating cloud billing exports."""
from typing import List

import pandas as pd
from pydantic import BaseModel, Field

from core.exceptions import AgentInputError
from tools.csv_profile import find_column, to_numbers

SERVICE_COLUMNS = ["service", "service name", "product", "product name", "productcode", "meter category"]
COST_COLUMNS = ["cost", "unblendedcost", "unblended cost", "amount", "cost usd", "charge", "total"]
RESOURCE_COLUMNS = ["resource id", "resourceid", "resource", "instance id", "usage type"]


class ServiceCost(BaseModel):
    service: str
    cost: float
    percentage: float


class LineItem(BaseModel):
    service: str
    resource: str = ""
    cost: float


class BillingSummary(BaseModel):
    total_spend: float
    row_count: int
    services: List[ServiceCost] = Field(default_factory=list)
    top_items: List[LineItem] = Field(default_factory=list)

    @property
    def top_services(self) -> List[ServiceCost]:
        return self.services[:3]


def summarize_billing(df: pd.DataFrame, top_n: int = 10) -> BillingSummary:
    """Total spend, spend per service (largest first) and the costliest line items."""
    cost_column = find_column(df, COST_COLUMNS)
    if cost_column is None:
        raise AgentInputError("Billing CSV must include a cost column")
    service_column = find_column(df, SERVICE_COLUMNS)
    resource_column = find_column(df, RESOURCE_COLUMNS)

    frame = pd.DataFrame({
        "service": df[service_column].astype(str).str.strip() if service_column else "Unknown",
        "resource": df[resource_column].astype(str).str.strip() if resource_column else "",
        "cost": to_numbers(df[cost_column]),
    }).dropna(subset=["cost"])
    frame.loc[frame["service"] == "", "service"] = "Unknown"

    total = float(frame["cost"].sum())
    by_service = frame.groupby("service")["cost"].sum().sort_values(ascending=False)
    services = [
        ServiceCost(
            service=str(service),
            cost=round(float(cost), 2),
            percentage=round(float(cost) / total * 100, 1) if total else 0.0,
        )
        for service, cost in by_service.items()
    ]
    items = frame.sort_values("cost", ascending=False).head(top_n)
    return BillingSummary(
        total_spend=round(total, 2),
        row_count=int(len(frame)),
        services=services,
        top_items=[
            LineItem(service=row.service, resource=row.resource, cost=round(float(row.cost), 2))
            for row in items.itertuples(index=False)
        ],
    )
