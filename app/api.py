import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from dotenv import load_dotenv

from app.responses import register_error_handlers
from app.routes import subscriptions, users
from core.db import init_db

# Ensure .env values are loaded even if uvicorn is launched without `dotenv run`.
load_dotenv(override=True)

log = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log.info("database schema ready")
    yield


app = FastAPI(lifespan=lifespan)
register_error_handlers(app)

app.include_router(users.router)
app.include_router(subscriptions.router)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Cache-Control", "no-store")
    return response
