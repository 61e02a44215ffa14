from __future__ import annotations

from flask import Flask

from ..auth.guards import make_guards
from ..auth.model import AuthenticatedUser
from ..common.responses import success_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.auth_service)
    prefix = app.config["API_PREFIX"]
    catalog = container.catalog_service

    @app.route(f"{prefix}/products", methods=["GET"], endpoint="list_products")
    @login_required
    def list_products(caller: AuthenticatedUser):
        data = [p.to_dict() for p in catalog.list_products()]
        return success_response(data, "Products retrieved successfully")

    # Product "types" are the catalog itself; kept for clients that still call it.
    @app.route(f"{prefix}/products/types", methods=["GET"], endpoint="list_product_types")
    @login_required
    def list_product_types(caller: AuthenticatedUser):
        data = [{"id": p.product_id, "name": p.name} for p in catalog.list_products()]
        return success_response(data, "Product types retrieved successfully")

    @app.route(f"{prefix}/products/<int:product_id>", methods=["GET"], endpoint="get_product")
    @login_required
    def get_product(product_id: int, caller: AuthenticatedUser):
        return success_response(catalog.get_product(product_id).to_dict(), "Product retrieved successfully")

    @app.route(f"{prefix}/franchises", methods=["GET"], endpoint="list_franchises")
    @login_required
    def list_franchises(caller: AuthenticatedUser):
        data = [f.to_dict() for f in catalog.list_franchises()]
        return success_response(data, "Franchises retrieved successfully")

    @app.route(f"{prefix}/franchises/<int:franchise_id>", methods=["GET"], endpoint="get_franchise")
    @login_required
    def get_franchise(franchise_id: int, caller: AuthenticatedUser):
        return success_response(catalog.get_franchise(franchise_id).to_dict(), "Franchise retrieved successfully")

    @app.route(f"{prefix}/roles", methods=["GET"], endpoint="list_roles")
    @admin_required
    def list_roles(caller: AuthenticatedUser):
        data = [r.to_dict() for r in catalog.list_roles(current_role=caller.role)]
        return success_response(data, "Roles retrieved successfully")
