import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from expense_tracker.config import settings
from expense_tracker.database import check_connection, init_db
from expense_tracker.errors import register_exception_handlers
from expense_tracker.users.routers import router as auth_router
from expense_tracker.accounts.expenses.router import router as expenses_router
from expense_tracker.accounts.config.router import router as config_router

logger.add(settings.LOG_FILE, rotation="500 MB", level=settings.LOG_LEVEL)


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    try:
        init_db()
    except SQLAlchemyError as exc:
        logger.critical(f"Database unavailable at startup: {exc}")
        raise
    yield
    logger.info("Application shutdown")


# Create app
app = FastAPI(
    title="EXPENSE TRACKER API",
    description="Household expense tracker: expenses, category configuration and session login.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(config_router, prefix="/api", tags=["Config"])
app.include_router(expenses_router, prefix="/api", tags=["Expenses"])


@app.get("/health")
def health_check():
    return {"status": "ok"}


def run():
    try:
        check_connection()
    except SQLAlchemyError as exc:
        logger.critical(f"Could not connect to database: {exc}")
        sys.exit(1)
    logger.info(f"Database connected, serving on {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
