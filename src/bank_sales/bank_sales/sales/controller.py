from __future__ import annotations

from flask import Flask, request

from ..auth.guards import make_guards
from ..auth.model import AuthenticatedUser
from ..common.request_utils import json_body
from ..common.responses import created_response, paginated_response, success_response
from ..container import Container
from .scope import parse_sale_filters


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container.auth_service)
    prefix = f"{app.config['API_PREFIX']}/sales"
    sales = container.sale_service
    stats = container.stats_service

    def _page_response(result, message: str):
        return paginated_response(
            [v.to_dict() for v in result.items],
            page=result.page,
            limit=result.limit,
            total=result.total,
            message=message,
        )

    @app.route(prefix, methods=["GET"], endpoint="list_sales")
    @login_required
    def list_sales(caller: AuthenticatedUser):
        result = sales.list(
            parse_sale_filters(request.args),
            current_role=caller.role,
            current_user_id=caller.user_id,
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        return _page_response(result, "Sales retrieved successfully")

    @app.route(f"{prefix}/my-sales", methods=["GET"], endpoint="list_my_sales")
    @login_required
    def list_my_sales(caller: AuthenticatedUser):
        result = sales.list_mine(
            parse_sale_filters(request.args),
            current_role=caller.role,
            current_user_id=caller.user_id,
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        return _page_response(result, "Your sales retrieved successfully")

    @app.route(f"{prefix}/total", methods=["GET"], endpoint="sales_total_amount")
    @login_required
    def total_amount(caller: AuthenticatedUser):
        total = stats.total_amount(
            current_role=caller.role,
            current_user_id=caller.user_id,
            filters=parse_sale_filters(request.args),
        )
        return success_response({"totalAmount": str(total)}, "Total amount retrieved successfully")

    @app.route(f"{prefix}/count-by-status", methods=["GET"], endpoint="sales_count_by_status")
    @login_required
    def count_by_status(caller: AuthenticatedUser):
        counts = stats.count_by_status(
            current_role=caller.role,
            current_user_id=caller.user_id,
            filters=parse_sale_filters(request.args),
        )
        return success_response(counts, "Sales count by status retrieved successfully")

    @app.route(f"{prefix}/<int:sale_id>", methods=["GET"], endpoint="get_sale")
    @login_required
    def get_sale(sale_id: int, caller: AuthenticatedUser):
        view = sales.get_by_id(sale_id, current_role=caller.role, current_user_id=caller.user_id)
        return success_response(view.to_dict(), "Sale retrieved successfully")

    @app.route(prefix, methods=["POST"], endpoint="create_sale")
    @login_required
    def create_sale(caller: AuthenticatedUser):
        view = sales.create(json_body(), current_user_id=caller.user_id)
        return created_response(view.to_dict(), "Sale created successfully")

    @app.route(f"{prefix}/<int:sale_id>", methods=["PUT"], endpoint="update_sale")
    @login_required
    def update_sale(sale_id: int, caller: AuthenticatedUser):
        view = sales.update(sale_id, json_body(), current_role=caller.role, current_user_id=caller.user_id)
        return success_response(view.to_dict(), "Sale updated successfully")

    @app.route(f"{prefix}/<int:sale_id>", methods=["DELETE"], endpoint="delete_sale")
    @login_required
    def delete_sale(sale_id: int, caller: AuthenticatedUser):
        sales.delete(sale_id, current_role=caller.role, current_user_id=caller.user_id)
        return success_response(None, "Sale deleted successfully")
