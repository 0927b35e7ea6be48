import logging
import secrets
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from store_sales import models  # noqa: F401  (registers tables on Base.metadata)
from store_sales.config import Settings, get_settings
from store_sales.core.auth import AuthNotifier, log_auth_event
from store_sales.core.constants import STATIC_DIR, TEMPLATES_DIR
from store_sales.core.dates import month_label
from store_sales.core.errors import setup_exception_handlers
from store_sales.core.logging import setup_logging
from store_sales.core.templating import render
from store_sales.database import Base, engine
from store_sales.routers import (
    api_router,
    auth_router,
    dashboard_router,
    health_router,
    reports_router,
    sales_router,
    stores_router,
)

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)


def create_tables(bind=engine) -> None:
    Base.metadata.create_all(bind=bind)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    create_tables()
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield
    logger.info("%s stopping", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
setup_exception_handlers(app)
app.state.templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
app.state.templates.env.filters["month_label"] = month_label
app.state.auth_notifier = AuthNotifier()
app.state.auth_notifier.subscribe(log_auth_event)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.DASHBOARD_SESSION_SECRET or secrets.token_urlsafe(32),
    session_cookie=settings.DASHBOARD_SESSION_COOKIE,
    same_site="lax",
    https_only=settings.ENVIRONMENT.lower() != "local",
)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(stores_router)
app.include_router(sales_router)
app.include_router(dashboard_router)
app.include_router(reports_router)
app.include_router(api_router)


@app.get("/", response_class=HTMLResponse)
def home(request: Request):
    return render(request, "index.html")


__all__ = ["app", "create_tables", "home"]
