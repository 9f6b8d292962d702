# This file bootstraps the FastAPI app, wires up middlewares for
# logging/metrics, sets up CORS, and includes the storefront routers.

import os

from fastapi import APIRouter, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app import models  # noqa: F401  registers every table on Base.metadata
from app.core.db import Base, engine
from app.core.config import settings
from app.core.errors import CheckoutError
from app.core.logging import APILoggingMiddleware
from app.core.metrics import MetricsMiddleware

from app.api.checkout import router as checkout_router
from app.api.referrals import router as referrals_router


# Create DB tables right away so the app doesn't hit missing
# schema issues later. Skipped when migrations own the schema.
if os.getenv("SKIP_MIGRATIONS") != "1":
    Base.metadata.create_all(bind=engine)

app = FastAPI(title="Storefront Checkout")


@app.exception_handler(CheckoutError)
def handle_checkout_error(_request, exc: CheckoutError):
    response = JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    response.headers["X-Error-Code"] = exc.code
    return response


# Observability layers
app.add_middleware(APILoggingMiddleware)
app.add_middleware(MetricsMiddleware)

api_v1 = APIRouter(prefix=settings.API_V1_PREFIX)
api_root = APIRouter(prefix="")

routers = [
    checkout_router,
    referrals_router,
]

for r in routers:
    api_v1.include_router(r)
    api_root.include_router(r)

app.include_router(api_v1)
app.include_router(api_root)


# /metrics endpoint (Prometheus scraping)
@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/ping")
@app.get(f"{settings.API_V1_PREFIX}/health")
def ping():
    return {"message": "pong"}


# CORS setup so the storefront SPA can call the API during local dev.
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Error-Code"],
    max_age=86400,
)
