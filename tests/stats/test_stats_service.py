from __future__ import annotations

from decimal import Decimal

import pytest

from src.bank_sales.bank_sales.core.enums import Role
from src.bank_sales.bank_sales.core.exceptions import OutOfRangeError, ValidationError
from src.bank_sales.bank_sales.sales.scope import SaleFilters
from src.bank_sales.bank_sales.stats.model import average


@pytest.fixture
def seeded(container, admin, advisor_a, advisor_b):
    sales = container.sale_service
    s1 = sales.create(
        {"productId": 1, "requestedAmount": "5000000", "rate": "15.5"},
        current_user_id=advisor_a.user_id,
    )
    s2 = sales.create(
        {"productId": 3, "requestedAmount": "2000000", "franchiseId": 2},
        current_user_id=advisor_b.user_id,
    )
    return s1, s2


@pytest.fixture
def stats(container):
    return container.stats_service


def test_by_advisor_reports_each_creator(stats, seeded, admin, advisor_a, advisor_b):
    rows = {b.user_id: b for b in stats.by_advisor(current_role=Role.ADMIN, current_user_id=admin.user_id)}

    assert rows[advisor_a.user_id].count == 1
    assert rows[advisor_a.user_id].total_amount == Decimal("5000000.00")
    assert rows[advisor_b.user_id].count == 1
    assert rows[advisor_b.user_id].total_amount == Decimal("2000000.00")
    assert rows[advisor_b.user_id].to_dict()["userRole"] == "Advisor"


def test_by_advisor_is_empty_for_advisors(stats, seeded, advisor_a):
    assert stats.by_advisor(current_role=Role.ADVISOR, current_user_id=advisor_a.user_id) == []


def test_dashboard_is_scoped_to_the_advisor(stats, seeded, advisor_a, admin):
    mine = stats.dashboard_metrics(current_role=Role.ADVISOR, current_user_id=advisor_a.user_id)
    assert mine == {
        "totalSales": 1,
        "totalAmount": "5000000.00",
        "averageAmount": "5000000.00",
        "salesByStatus": {"open": 1, "inProcess": 0, "finished": 0},
    }

    everything = stats.dashboard_metrics(current_role=Role.ADMIN, current_user_id=admin.user_id)
    assert everything["totalSales"] == 2
    assert everything["totalAmount"] == "7000000.00"
    assert everything["averageAmount"] == "3500000.00"


def test_empty_scope_averages_to_zero(stats, advisor_a):
    metrics = stats.dashboard_metrics(current_role=Role.ADVISOR, current_user_id=advisor_a.user_id)
    assert metrics["totalSales"] == 0
    assert metrics["totalAmount"] == "0.00"
    assert metrics["averageAmount"] == "0.00"
    assert average(Decimal("0"), 0) == Decimal("0.00")


def test_total_amount_equals_sum_of_listed_items(container, stats, seeded, admin, advisor_a):
    container.sale_service.create(
        {"productId": 2, "requestedAmount": "1234.56", "rate": "9"},
        current_user_id=advisor_a.user_id,
    )
    for role, user_id in ((Role.ADMIN, admin.user_id), (Role.ADVISOR, advisor_a.user_id)):
        filters = SaleFilters()
        listed = container.sale_service.list(filters, current_role=role, current_user_id=user_id, limit=100)
        expected = sum((v.sale.requested_amount for v in listed.items), Decimal("0"))
        assert stats.total_amount(current_role=role, current_user_id=user_id, filters=filters) == expected


def test_count_by_status_includes_total(stats, container, seeded, admin):
    s1, _ = seeded
    container.sale_service.update(
        s1.sale_id, {"status": "Finished"}, current_role=Role.ADMIN, current_user_id=admin.user_id
    )
    counts = stats.count_by_status(current_role=Role.ADMIN, current_user_id=admin.user_id)
    assert counts == {"open": 1, "inProcess": 0, "finished": 1, "total": 2}


def test_by_product_and_top_products_sort_by_count(stats, container, seeded, admin, advisor_a):
    container.sale_service.create(
        {"productId": 3, "requestedAmount": "100", "franchiseId": 1},
        current_user_id=advisor_a.user_id,
    )
    rows = stats.by_product(current_role=Role.ADMIN, current_user_id=admin.user_id)
    assert [(b.product_id, b.count) for b in rows] == [(3, 2), (1, 1)]
    assert rows[0].to_dict()["averageAmount"] == "1000050.00"

    top = stats.top_products(current_role=Role.ADMIN, current_user_id=admin.user_id, limit=1)
    assert [b.to_top_dict()["salesCount"] for b in top] == [2]


def test_by_period_groups_by_day_and_rejects_unknown_period(stats, seeded, admin, fixed_now):
    rows = stats.by_period("day", current_role=Role.ADMIN, current_user_id=admin.user_id)
    assert [r.to_dict() for r in rows] == [
        {"period": fixed_now.strftime("%Y-%m-%d"), "count": 2, "totalAmount": "7000000.00"}
    ]
    month = stats.by_period("month", current_role=Role.ADMIN, current_user_id=admin.user_id)
    assert month[0].period == "2026-03"

    with pytest.raises(ValidationError):
        stats.by_period("year", current_role=Role.ADMIN, current_user_id=admin.user_id)


def test_recent_returns_newest_scoped_views(stats, seeded, advisor_b):
    _, s2 = seeded
    recent = stats.recent(current_role=Role.ADVISOR, current_user_id=advisor_b.user_id)
    assert [v.sale_id for v in recent] == [s2.sale_id]


def test_trends_cover_requested_days(stats, seeded, admin):
    data = stats.trends(current_role=Role.ADMIN, current_user_id=admin.user_id, days=7)
    assert data["period"] == "Last 7 days"
    assert sum(t["count"] for t in data["trends"]) == 2


def test_comprehensive_hides_advisor_breakdown_from_advisors(stats, seeded, admin, advisor_a):
    as_admin = stats.comprehensive(current_role=Role.ADMIN, current_user_id=admin.user_id)
    assert len(as_admin["salesByAdvisor"]) == 2

    as_advisor = stats.comprehensive(current_role=Role.ADVISOR, current_user_id=advisor_a.user_id)
    assert "salesByAdvisor" not in as_advisor
    assert as_advisor["metrics"]["totalSales"] == 1
    assert len(as_advisor["recentSales"]) == 1


def test_trends_accept_a_full_year_and_reject_longer_windows(stats, seeded, admin, fixed_now):
    year = stats.trends(current_role=Role.ADMIN, current_user_id=admin.user_id, days="365")
    assert year["period"] == "Last 365 days"
    assert year["startDate"] == "2025-03-10"
    assert sum(t["count"] for t in year["trends"]) == 2

    with pytest.raises(OutOfRangeError):
        stats.trends(current_role=Role.ADMIN, current_user_id=admin.user_id, days=366)
    with pytest.raises(ValidationError):
        stats.trends(current_role=Role.ADMIN, current_user_id=admin.user_id, days=0)
