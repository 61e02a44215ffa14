from __future__ import annotations

from flask import Flask, request

from ..auth.guards import make_guards
from ..auth.model import AuthenticatedUser
from ..common.request_utils import json_body
from ..common.responses import created_response, paginated_response, success_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.auth_service)
    prefix = f"{app.config['API_PREFIX']}/users"
    users = container.user_service

    @app.route(prefix, methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users(caller: AuthenticatedUser):
        result = users.list_users(
            current_role=caller.role,
            search=request.args.get("search"),
            role_id=request.args.get("roleId"),
            page=request.args.get("page"),
            limit=request.args.get("limit"),
        )
        return paginated_response(
            [u.to_dict() for u in result.items],
            page=result.page,
            limit=result.limit,
            total=result.total,
            message="Users retrieved successfully",
        )

    @app.route(f"{prefix}/check-email", methods=["GET"], endpoint="check_email")
    @login_required
    def check_email(caller: AuthenticatedUser):
        exists = users.check_email_exists(
            request.args.get("email"),
            exclude_user_id=request.args.get("excludeUserId"),
        )
        return success_response({"exists": exists}, "Email check completed")

    @app.route(f"{prefix}/count-by-role", methods=["GET"], endpoint="count_users_by_role")
    @admin_required
    def count_by_role(caller: AuthenticatedUser):
        return success_response(users.count_by_role(current_role=caller.role), "User counts retrieved successfully")

    @app.route(f"{prefix}/<int:user_id>", methods=["GET"], endpoint="get_user")
    @login_required
    def get_user(user_id: int, caller: AuthenticatedUser):
        user = users.get_user(current_role=caller.role, current_user_id=caller.user_id, user_id=user_id)
        return success_response(user.to_dict(), "User retrieved successfully")

    @app.route(prefix, methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user(caller: AuthenticatedUser):
        body = json_body()
        user = users.create_user(
            current_role=caller.role,
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
            role_id=body.get("roleId"),
        )
        return created_response(user.to_dict(), "User created successfully")

    @app.route(f"{prefix}/<int:user_id>", methods=["PUT"], endpoint="update_user")
    @login_required
    def update_user(user_id: int, caller: AuthenticatedUser):
        user = users.update_user(
            current_role=caller.role,
            current_user_id=caller.user_id,
            user_id=user_id,
            patch=json_body(),
        )
        return success_response(user.to_dict(), "User updated successfully")

    @app.route(f"{prefix}/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int, caller: AuthenticatedUser):
        users.delete_user(current_role=caller.role, current_user_id=caller.user_id, user_id=user_id)
        return success_response(None, "User deleted successfully")
