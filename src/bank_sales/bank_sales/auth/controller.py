from __future__ import annotations

from flask import Flask

from ..common.request_utils import json_body
from ..common.responses import success_response
from ..container import Container
from .guards import make_guards
from .model import AuthenticatedUser


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container.auth_service)
    prefix = f"{app.config['API_PREFIX']}/auth"
    auth = container.auth_service

    @app.route(f"{prefix}/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        result = auth.authenticate(body.get("email"), body.get("password"))
        return success_response(result.to_dict(), "Login successful")

    # Tokens are stateless; the client discards its copy.
    @app.route(f"{prefix}/logout", methods=["POST"], endpoint="auth_logout")
    @login_required
    def logout(caller: AuthenticatedUser):
        return success_response(None, "Logout successful")

    @app.route(f"{prefix}/verify", methods=["GET"], endpoint="auth_verify")
    @login_required
    def verify(caller: AuthenticatedUser):
        return success_response({"valid": True, "user": caller.to_dict()}, "Token is valid")

    @app.route(f"{prefix}/profile", methods=["GET"], endpoint="auth_profile")
    @login_required
    def profile(caller: AuthenticatedUser):
        return success_response(auth.profile(caller.user_id).to_dict(), "Profile retrieved successfully")

    @app.route(f"{prefix}/change-password", methods=["PUT"], endpoint="auth_change_password")
    @login_required
    def change_password(caller: AuthenticatedUser):
        body = json_body()
        auth.change_password(caller.user_id, body.get("currentPassword"), body.get("newPassword"))
        return success_response(None, "Password changed successfully")

    @app.route(f"{prefix}/refresh", methods=["POST"], endpoint="auth_refresh")
    @login_required
    def refresh(caller: AuthenticatedUser):
        return success_response(auth.refresh(caller.user_id).to_dict(), "Token refreshed successfully")
