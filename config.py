import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    UPSTREAM_API_URL = data.get("UPSTREAM_API_URL", "http://localhost:8080/api")
    UPSTREAM_TIMEOUT_SECONDS = float(data.get("UPSTREAM_TIMEOUT_SECONDS", 10.0))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    CURRENCY = data.get("CURRENCY", "KES")

    # Returns: restock DAMAGED units instead of writing them off
    RESTOCK_DAMAGED_RETURNS = bool(data.get("RESTOCK_DAMAGED_RETURNS", False))

    # Stock levels shown at the till and used for reorder alerts
    REORDER_LEVEL = data.get("REORDER_LEVEL", 5)
    LOW_STOCK_LEVEL = data.get("LOW_STOCK_LEVEL", 15)
    LOW_STOCK_ALERTS_ENABLED = bool(data.get("LOW_STOCK_ALERTS_ENABLED", True))
    LOW_STOCK_WEBHOOK = data.get("LOW_STOCK_WEBHOOK", None)
