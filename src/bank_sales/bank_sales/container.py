from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.service import AuthService
from .auth.tokens import TokenService
from .catalog.mysql_catalog_repository import MySQLCatalogRepository
from .catalog.repository import CatalogRepository
from .catalog.service import CatalogService
from .core.constants import DEFAULT_PAGE_LIMIT, DEFAULT_TOKEN_HOURS, MAX_PAGE_LIMIT
from .database.connection import DBConfig, DatabaseConnection
from .sales.mysql_sale_repository import MySQLSaleRepository
from .sales.repository import SaleRepository
from .sales.service import SaleService
from .stats.mysql_stats_repository import MySQLStatsRepository
from .stats.repository import StatsRepository
from .stats.service import StatsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    catalog_repo: CatalogRepository
    sales_repo: SaleRepository
    stats_repo: StatsRepository

    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    catalog_service: CatalogService
    sale_service: SaleService
    stats_service: StatsService


def wire_container(
    *,
    users_repo: UserRepository,
    catalog_repo: CatalogRepository,
    sales_repo: SaleRepository,
    stats_repo: StatsRepository,
    jwt_secret: str,
    jwt_expiration_hours: int = DEFAULT_TOKEN_HOURS,
    default_limit: int = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of the given repositories (MySQL or in-memory)."""
    token_service = TokenService(jwt_secret, jwt_expiration_hours)
    catalog_service = CatalogService(catalog_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        catalog_repo=catalog_repo,
        sales_repo=sales_repo,
        stats_repo=stats_repo,
        token_service=token_service,
        auth_service=AuthService(users_repo, token_service),
        user_service=UserService(users_repo, default_limit=default_limit, max_limit=max_limit),
        catalog_service=catalog_service,
        sale_service=SaleService(sales_repo, catalog_service, default_limit=default_limit, max_limit=max_limit),
        stats_service=StatsService(stats_repo, sales_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_expiration_hours: int = DEFAULT_TOKEN_HOURS,
    default_limit: int = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
) -> Container:
    conn = DatabaseConnection.for_config(DBConfig.from_mapping(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        catalog_repo=MySQLCatalogRepository(conn),
        sales_repo=MySQLSaleRepository(conn),
        stats_repo=MySQLStatsRepository(conn),
        jwt_secret=jwt_secret,
        jwt_expiration_hours=jwt_expiration_hours,
        default_limit=default_limit,
        max_limit=max_limit,
        conn=conn,
    )
