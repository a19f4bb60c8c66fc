"""
Admin reporting schemas.
"""

from pydantic import Field

from shared.utils.schemas import CamelModel, OrderOutput, ShopOutput, UserOutput


class TotalCounts(CamelModel):
    users: int
    shops: int
    orders: int
    menu_items: int


class RevenueSummary(CamelModel):
    total_cents: int
    total_completed_orders: int


class MonthlyPoint(CamelModel):
    year: int
    month: int
    orders: int
    revenue_cents: int


class DashboardStats(CamelModel):
    total_counts: TotalCounts
    users_by_role: dict[str, int]
    shops_by_status: dict[str, int]
    orders_by_status: dict[str, int]
    revenue: RevenueSummary
    recent_orders: list[OrderOutput]
    recent_users: list[UserOutput]
    top_shops: list[ShopOutput]
    monthly_data: list[MonthlyPoint]


class DailyRevenue(CamelModel):
    date: str  # YYYY-MM-DD
    revenue_cents: int
    orders: int


class RevenueStatsSummary(CamelModel):
    total_revenue_cents: int
    total_orders: int
    average_order_value_cents: int
    period: str


class RevenueStats(CamelModel):
    daily_stats: list[DailyRevenue]
    summary: RevenueStatsSummary


class OrderStats(CamelModel):
    daily_stats: dict[str, dict[str, int]] = Field(default_factory=dict)
    status_distribution: dict[str, int] = Field(default_factory=dict)
    period: str
