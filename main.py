import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from infrastructure.db.sqlite import init_db
from infrastructure.web.controllers.transaction_controller import router as transaction_router
from infrastructure.web.errors import register_error_handlers


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Wallet API",
    description="REST API for a personal wallet: income and expense transactions, balance and summary",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

@app.on_event("startup")
def on_startup():
    if settings.STORAGE_BACKEND != "memory":
        init_db(settings.DB_PATH)
    logger.info("wallet_started backend=%s prefix=%s", settings.STORAGE_BACKEND, settings.API_PREFIX)

app.include_router(transaction_router, prefix=settings.API_PREFIX)
