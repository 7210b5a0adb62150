import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from esnaf_defterim.api.errors import register_exception_handlers
from esnaf_defterim.api.routes.auth import router as auth_router
from esnaf_defterim.api.routes.cash import router as cash_router
from esnaf_defterim.api.routes.catalog import router as catalog_router
from esnaf_defterim.api.routes.dashboard import router as dashboard_router
from esnaf_defterim.api.routes.sales import router as sales_router
from esnaf_defterim.api.routes.stock import router as stock_router
from esnaf_defterim.api.routes.users import router as users_router
from esnaf_defterim.core.config import configure_logging, settings
from esnaf_defterim.db.database import SessionLocal, init_db
from esnaf_defterim.schemas.common import Envelope
from esnaf_defterim.services.seed import seed_admin, seed_categories

configure_logging()
logger = logging.getLogger(__name__)


def _bootstrap() -> None:
    if settings.auto_create_tables:
        init_db()
        logger.info("database tables ensured")
    if not (settings.seed_admin_enabled or settings.seed_categories_enabled):
        return
    db = SessionLocal()
    try:
        if settings.seed_admin_enabled:
            seed_admin(db)
        if settings.seed_categories_enabled:
            seed_categories(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(_: FastAPI):
    _bootstrap()
    logger.info("%s started, api prefix %r", settings.app_name, settings.api_prefix)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

for router in (
    auth_router,
    users_router,
    stock_router,
    catalog_router,
    sales_router,
    cash_router,
    dashboard_router,
):
    app.include_router(router, prefix=settings.api_prefix)


@app.get("/health", tags=["System"], response_model=Envelope[dict])
def health_check():
    return Envelope(message="ok", data={"status": "ok"})
