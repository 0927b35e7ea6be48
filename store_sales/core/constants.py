from pathlib import Path


APP_DIR = Path(__file__).resolve().parents[1]
PROJECT_ROOT = APP_DIR.parent

TEMPLATES_DIR = APP_DIR / "templates"
STATIC_DIR = APP_DIR / "static"

LOGIN_PATH = "/login"
DEFAULT_DASHBOARD_PATH = "/dashboard"

REPORT_VIEWS = ("detailed", "monthly", "items")
DEFAULT_REPORT_VIEW = "detailed"

TOP_PRODUCTS_LIMIT = 5

# rows offered by the sale-batch forms
MAX_ENTRY_ROWS = 50
