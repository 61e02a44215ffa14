import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "bank_sales_test"),
}

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRATION_HOURS = 1

API_PREFIX = "/api"
PAGINATION_DEFAULT_LIMIT = 10
PAGINATION_MAX_LIMIT = 100

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

ADMIN_EMAIL = "admin@bank.com"
ADMIN_PASSWORD = "Admin123"
