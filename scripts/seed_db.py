from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.bank_sales.bank_sales.database.bootstrap import apply_seed_sql, ensure_admin_user


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    # Roles, products and franchises; users are not part of seed.sql.
    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")

    admin_email = getattr(settings, "ADMIN_EMAIL", "")
    admin_password = getattr(settings, "ADMIN_PASSWORD", "")
    if not (admin_email and admin_password):
        raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD must be set to seed the admin account.")
    ensure_admin_user(db_config, email=admin_email, password=admin_password)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(admin={admin_email})"
    )


if __name__ == "__main__":
    main()
