from __future__ import annotations

from flask import Flask, request

from ..auth.guards import make_guards
from ..auth.model import AuthenticatedUser
from ..common.responses import success_response
from ..container import Container
from ..sales.scope import parse_sale_filters


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.auth_service)
    prefix = f"{app.config['API_PREFIX']}/stats"
    stats = container.stats_service

    def _who(caller: AuthenticatedUser) -> dict:
        return {"current_role": caller.role, "current_user_id": caller.user_id}

    @app.route(f"{prefix}/dashboard", methods=["GET"], endpoint="stats_dashboard")
    @login_required
    def dashboard(caller: AuthenticatedUser):
        data = stats.dashboard_metrics(filters=parse_sale_filters(request.args), **_who(caller))
        return success_response(data, "Dashboard metrics retrieved successfully")

    @app.route(f"{prefix}/comprehensive", methods=["GET"], endpoint="stats_comprehensive")
    @login_required
    def comprehensive(caller: AuthenticatedUser):
        data = stats.comprehensive(filters=parse_sale_filters(request.args), **_who(caller))
        return success_response(data, "Comprehensive dashboard retrieved successfully")

    @app.route(f"{prefix}/by-product", methods=["GET"], endpoint="stats_by_product")
    @login_required
    def by_product(caller: AuthenticatedUser):
        buckets = stats.by_product(filters=parse_sale_filters(request.args), **_who(caller))
        return success_response([b.to_dict() for b in buckets], "Sales by product retrieved successfully")

    @app.route(f"{prefix}/by-advisor", methods=["GET"], endpoint="stats_by_advisor")
    @admin_required
    def by_advisor(caller: AuthenticatedUser):
        buckets = stats.by_advisor(filters=parse_sale_filters(request.args), **_who(caller))
        return success_response([b.to_dict() for b in buckets], "Sales by advisor retrieved successfully")

    @app.route(f"{prefix}/by-status", methods=["GET"], endpoint="stats_by_status")
    @login_required
    def by_status(caller: AuthenticatedUser):
        buckets = stats.by_status(filters=parse_sale_filters(request.args), **_who(caller))
        return success_response([b.to_dict() for b in buckets], "Sales by status retrieved successfully")

    @app.route(f"{prefix}/by-period", methods=["GET"], endpoint="stats_by_period")
    @login_required
    def by_period(caller: AuthenticatedUser):
        period = request.args.get("period")
        buckets = stats.by_period(period, filters=parse_sale_filters(request.args), **_who(caller))
        return success_response([b.to_dict() for b in buckets], f"Sales by {period} retrieved successfully")

    @app.route(f"{prefix}/recent", methods=["GET"], endpoint="stats_recent")
    @login_required
    def recent(caller: AuthenticatedUser):
        views = stats.recent(limit=request.args.get("limit"), **_who(caller))
        return success_response([v.to_dict() for v in views], "Recent sales retrieved successfully")

    @app.route(f"{prefix}/top-products", methods=["GET"], endpoint="stats_top_products")
    @login_required
    def top_products(caller: AuthenticatedUser):
        buckets = stats.top_products(
            limit=request.args.get("limit"),
            filters=parse_sale_filters(request.args),
            **_who(caller),
        )
        return success_response([b.to_top_dict() for b in buckets], "Top products retrieved successfully")

    @app.route(f"{prefix}/trends", methods=["GET"], endpoint="stats_trends")
    @login_required
    def trends(caller: AuthenticatedUser):
        data = stats.trends(days=request.args.get("days"), **_who(caller))
        return success_response(data, "Sales trends retrieved successfully")
