"""Promotions FastAPI application.

Processes coupon commands synchronously via HTTP. Each request under a
promotions route is wrapped in the promotions domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from promotions.domain import promotions
from promotions.utils.logging import add_context, clear_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from promotions/domain.toml.
promotions.init()

_DOMAIN_PREFIXES = ("/coupons", "/carts")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Promotions API",
    description="Coupon registry and cart coupon application",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the promotions domain context and bind request logging context."""
    if not request.url.path.startswith(_DOMAIN_PREFIXES):
        # Health check, docs, etc.
        return await call_next(request)

    clear_context()
    add_context(request_id=request.headers.get("x-request-id") or str(uuid.uuid4()), path=request.url.path)
    try:
        with promotions.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from promotions.api.errors import register_exception_handlers  # noqa: E402
from promotions.api.routes import cart_router, coupon_router  # noqa: E402

app.include_router(coupon_router)
app.include_router(cart_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "promotions": {"name": promotions.name},
            },
        }
    )
