from __future__ import annotations

import os
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from werkzeug.security import generate_password_hash

os.environ.setdefault("APP_ENV", "testing")

from src.bank_sales.bank_sales.catalog.model import Franchise, Product, RoleInfo
from src.bank_sales.bank_sales.common import datetime_utils
from src.bank_sales.bank_sales.container import wire_container
from src.bank_sales.bank_sales.core.enums import Period, Role, SaleStatus
from src.bank_sales.bank_sales.core.exceptions import ValidationError
from src.bank_sales.bank_sales.sales.model import Sale, SaleView
from src.bank_sales.bank_sales.stats.model import AdvisorBucket, PeriodBucket, ProductBucket, StatusBucket
from src.bank_sales.bank_sales.users.model import User

ROLE_NAMES = {Role.ADMIN: "Admin", Role.ADVISOR: "Advisor"}

ADMIN_PASSWORD = "Admin123"
ADVISOR_PASSWORD = "Advisor123"


class FakeCatalogRepo:
    def __init__(self):
        self.products = {
            1: Product(1, "Consumer Credit", "Personal loan"),
            2: Product(2, "Free-Investment Payroll", "Payroll-deducted loan"),
            3: Product(3, "Credit Card", "Revolving credit"),
        }
        self.franchises = {1: Franchise(1, "AMEX"), 2: Franchise(2, "VISA"), 3: Franchise(3, "MASTERCARD")}

    def list_products(self):
        return list(self.products.values())

    def get_product(self, product_id):
        return self.products.get(int(product_id))

    def list_franchises(self):
        return list(self.franchises.values())

    def get_franchise(self, franchise_id):
        return self.franchises.get(int(franchise_id))

    def list_roles(self):
        return [RoleInfo(r.value, ROLE_NAMES[r], None) for r in Role]


class FakeUserRepo:
    def __init__(self):
        self._users: dict[int, User] = {}
        self._next_id = 1
        # Stands in for the sales.creator_user_id foreign key.
        self.delete_guard: Callable[[int], bool] = lambda user_id: False

    def add(self, *, full_name, email, password, role) -> User:
        user_id = self.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        return self._users[user_id]

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._users.values() if u.email == email), None)

    def email_exists(self, email, *, exclude_user_id=None):
        return any(u.email == email and u.user_id != exclude_user_id for u in self._users.values())

    def create_user(self, *, full_name, email, password_hash, role):
        user_id = self._next_id
        self._next_id += 1
        now = datetime(2026, 1, 1, 8, 0, 0) + timedelta(minutes=user_id)
        self._users[user_id] = User(
            user_id=user_id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            role_name=ROLE_NAMES[role],
            created_at=now,
            updated_at=now,
        )
        return user_id

    def update_user(self, user_id, *, full_name=None, email=None, password_hash=None, role=None):
        user = self._users.get(int(user_id))
        if not user:
            return False
        changes = {
            k: v
            for k, v in {
                "full_name": full_name,
                "email": email,
                "password_hash": password_hash,
                "role": role,
            }.items()
            if v is not None
        }
        if role is not None:
            changes["role_name"] = ROLE_NAMES[role]
        self._users[int(user_id)] = replace(user, **changes)
        return True

    def delete_by_id(self, user_id):
        if self.delete_guard(int(user_id)):
            raise ValidationError("Cannot delete a user who has registered sales")
        return self._users.pop(int(user_id), None) is not None

    def list_page(self, *, search=None, role=None, offset=0, limit=10):
        items = [
            u
            for u in self._users.values()
            if (not search or search.lower() in u.full_name.lower() or search.lower() in u.email)
            and (role is None or u.role == role)
        ]
        items.sort(key=lambda u: (u.created_at, u.user_id), reverse=True)
        return items[offset : offset + limit], len(items)

    def count_by_role(self):
        counts = {r: 0 for r in Role}
        for u in self._users.values():
            counts[u.role] += 1
        return counts


class FakeSaleRepo:
    def __init__(self, users: FakeUserRepo, catalog: FakeCatalogRepo):
        self._users = users
        self._catalog = catalog
        self._sales: dict[int, Sale] = {}
        self._next_id = 1
        self.writes = 0

    def all(self):
        return list(self._sales.values())

    def _view(self, sale: Sale) -> SaleView:
        franchise = self._catalog.get_franchise(sale.franchise_id) if sale.franchise_id else None
        creator = self._users.get_by_id(sale.creator_user_id)
        updater = self._users.get_by_id(sale.updater_user_id)
        return SaleView(
            sale=sale,
            product_name=self._catalog.get_product(sale.product_id).name,
            franchise_name=franchise.name if franchise else None,
            creator_name=creator.full_name,
            creator_email=creator.email,
            creator_role=creator.role_name,
            updater_name=updater.full_name if updater else None,
        )

    def get_by_id(self, sale_id):
        return self._sales.get(int(sale_id))

    def get_view(self, sale_id):
        sale = self._sales.get(int(sale_id))
        return self._view(sale) if sale else None

    def create_sale(self, *, product_id, requested_amount, franchise_id, rate, status, creator_user_id, created_at):
        self.writes += 1
        sale_id = self._next_id
        self._next_id += 1
        self._sales[sale_id] = Sale(
            sale_id=sale_id,
            product_id=product_id,
            requested_amount=requested_amount,
            franchise_id=franchise_id,
            rate=rate,
            status=status,
            creator_user_id=creator_user_id,
            updater_user_id=creator_user_id,
            created_at=created_at,
            updated_at=created_at,
        )
        return sale_id

    def update_sale(self, sale_id, *, product_id, requested_amount, franchise_id, rate, status, updater_user_id, updated_at):
        self.writes += 1
        self._sales[int(sale_id)] = replace(
            self._sales[int(sale_id)],
            product_id=product_id,
            requested_amount=requested_amount,
            franchise_id=franchise_id,
            rate=rate,
            status=status,
            updater_user_id=updater_user_id,
            updated_at=updated_at,
        )

    def delete_by_id(self, sale_id):
        self.writes += 1
        return self._sales.pop(int(sale_id), None) is not None

    def matching(self, scope):
        items = [s for s in self._sales.values() if scope.matches(s)]
        items.sort(key=lambda s: (s.created_at, s.sale_id), reverse=True)
        return items

    def list_views(self, scope, *, offset=0, limit=None):
        items = self.matching(scope)
        page = items[offset:] if limit is None else items[offset : offset + limit]
        return [self._view(s) for s in page], len(items)


class FakeStatsRepo:
    """Aggregates computed in Python over FakeSaleRepo, mirroring the SQL GROUP BYs."""

    def __init__(self, sales: FakeSaleRepo, users: FakeUserRepo, catalog: FakeCatalogRepo):
        self._sales = sales
        self._users = users
        self._catalog = catalog

    @staticmethod
    def _sum(items):
        return sum((s.requested_amount for s in items), Decimal("0"))

    def _group(self, scope, key):
        groups: dict = {}
        for s in self._sales.matching(scope):
            groups.setdefault(key(s), []).append(s)
        return groups

    def totals(self, scope):
        items = self._sales.matching(scope)
        return len(items), self._sum(items)

    def group_by_status(self, scope):
        groups = self._group(scope, lambda s: s.status)
        return [StatusBucket(st, len(groups[st]), self._sum(groups[st])) for st in SaleStatus if st in groups]

    def group_by_product(self, scope):
        groups = self._group(scope, lambda s: s.product_id)
        buckets = [
            ProductBucket(pid, self._catalog.get_product(pid).name, len(items), self._sum(items))
            for pid, items in groups.items()
        ]
        return sorted(buckets, key=lambda b: (-b.count, b.product_id))

    def group_by_creator(self, scope):
        groups = self._group(scope, lambda s: s.creator_user_id)
        buckets = []
        for uid, items in groups.items():
            u = self._users.get_by_id(uid)
            buckets.append(AdvisorBucket(uid, u.full_name, u.email, u.role_name, len(items), self._sum(items)))
        return sorted(buckets, key=lambda b: (-b.count, b.user_id))

    def group_by_period(self, scope, period):
        def label(s):
            if period == Period.DAY:
                return s.created_at.strftime("%Y-%m-%d")
            if period == Period.WEEK:
                year, week, _ = s.created_at.isocalendar()
                return f"{year}-W{week:02d}"
            return s.created_at.strftime("%Y-%m")

        groups = self._group(scope, label)
        return [PeriodBucket(k, len(groups[k]), self._sum(groups[k])) for k in sorted(groups)]


class Clock:
    """Deterministic now_utc(): advances one minute per call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 10, 9, 0, 0)


@pytest.fixture
def clock(monkeypatch, fixed_now):
    c = Clock(fixed_now)
    monkeypatch.setattr(datetime_utils, "now_utc", c)
    return c


@pytest.fixture
def catalog_repo():
    return FakeCatalogRepo()


@pytest.fixture
def users_repo():
    return FakeUserRepo()


@pytest.fixture
def sales_repo(users_repo, catalog_repo):
    repo = FakeSaleRepo(users_repo, catalog_repo)
    users_repo.delete_guard = lambda user_id: any(s.creator_user_id == user_id for s in repo.all())
    return repo


@pytest.fixture
def stats_repo(sales_repo, users_repo, catalog_repo):
    return FakeStatsRepo(sales_repo, users_repo, catalog_repo)


@pytest.fixture
def admin(users_repo):
    return users_repo.add(full_name="Admin User", email="admin@bank.com", password=ADMIN_PASSWORD, role=Role.ADMIN)


@pytest.fixture
def advisor_a(users_repo, admin):
    return users_repo.add(full_name="Advisor A", email="a@bank.com", password=ADVISOR_PASSWORD, role=Role.ADVISOR)


@pytest.fixture
def advisor_b(users_repo, advisor_a):
    return users_repo.add(full_name="Advisor B", email="b@bank.com", password=ADVISOR_PASSWORD, role=Role.ADVISOR)


@pytest.fixture
def container(users_repo, catalog_repo, sales_repo, stats_repo, clock):
    return wire_container(
        users_repo=users_repo,
        catalog_repo=catalog_repo,
        sales_repo=sales_repo,
        stats_repo=stats_repo,
        jwt_secret="test-jwt-secret",
        jwt_expiration_hours=1,
    )


@pytest.fixture
def app(container):
    from src.bank_sales.bank_sales.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(container) -> Callable[[User], dict]:
    def _headers(user: User, token: Optional[str] = None) -> dict:
        return {"Authorization": f"Bearer {token or container.token_service.issue(user)}"}

    return _headers
