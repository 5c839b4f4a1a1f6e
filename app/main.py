# app/main.py
from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from app.config import settings
from app.core.errors import NewsCoreError
from app.core.logging import configure_logging, get_logger
from app.core.request_id import request_scope, resolve_request_id

from api.routers.news import router as news_router
from api.routers.proxy import router as proxy_router
from api.routers.scrape import router as scrape_router

configure_logging(
    service_name="news-api",
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
)
logger = get_logger()

app = FastAPI(
    title="Financial News Backend",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = resolve_request_id(request.headers.get("x-request-id"))
        with request_scope(req_id):
            logger.info("request_started", method=request.method, path=str(request.url.path))
            try:
                response: StarletteResponse = await call_next(request)
            except Exception as exc:
                logger.error("request_exception", error=type(exc).__name__)
                raise
            logger.info("request_ended", status_code=response.status_code)
        response.headers["X-Request-Id"] = req_id
        return response


app.add_middleware(RequestIdMiddleware)
# Added last so CORS is the outermost middleware.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS", "HEAD"],
    allow_headers=["*"],
    expose_headers=["Content-Length", "X-Request-Id"],
)


@app.exception_handler(NewsCoreError)
async def news_core_exception_handler(request: Request, exc: NewsCoreError) -> JSONResponse:
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request_failed",
        path=str(request.url.path),
        error=type(exc).__name__,
        status_code=exc.status_code,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request parameters", "details": details})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=dict(exc.headers or {}),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# --- Health endpoints ---
@app.get("/")
async def root():
    return {"ok": True, "app": "Financial News Backend", "message": "Up & running"}


@app.head("/")
async def root_head():
    return Response(status_code=200)


@app.get("/healthz")
async def healthz():
    return {"status": "healthy"}


@app.get("/health")
async def health():
    return {"ok": True}


# --- API router ---
api_router = APIRouter(prefix="/api")
api_router.include_router(scrape_router)
api_router.include_router(news_router)
api_router.include_router(proxy_router)
app.include_router(api_router)

logger.info("routers_registered", routers=["scrape-article", "news", "proxy"])
