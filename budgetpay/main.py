import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import InterfaceError, OperationalError

from .config import Settings
from .database import Store, migrate
from .errors import BudgetPayError, UpstreamStoreUnavailable
from .routers import auth as auth_router
from .routers import budgets as budgets_router
from .routers import expenses as expenses_router
from .routers import profile as profile_router
from .routers import wallet as wallet_router
from .services.blobs import BlobStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = Store(settings)
    blobs = BlobStore(settings.upload_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        blobs.ensure()
        store.open()
        migrate(store)
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="BudgetPay – Backend", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.blobs = blobs

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BudgetPayError)
    async def budgetpay_error_handler(request: Request, exc: BudgetPayError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def store_error_handler(request: Request, exc: Exception):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        err = UpstreamStoreUnavailable()
        return JSONResponse(status_code=err.status_code, content={"detail": err.detail})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/health/db")
    def db_health():
        try:
            ok = store.ping()
        except OperationalError as e:
            logger.error("Database health check failed: %s", e)
            ok = False
        if not ok:
            err = UpstreamStoreUnavailable()
            return JSONResponse(status_code=err.status_code, content={"status": "error", "db": False})
        return {"status": "ok", "db": True}

    app.include_router(auth_router.router)
    app.include_router(profile_router.router)
    app.include_router(wallet_router.router)
    app.include_router(budgets_router.router)
    app.include_router(expenses_router.router)
    app.mount(BlobStore.url_prefix, StaticFiles(directory=str(blobs.root), check_dir=False), name="uploads")

    return app
