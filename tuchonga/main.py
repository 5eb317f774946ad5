import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware

from .api_router import api_router
from .core.config import ALLOWED_ORIGINS, APP_ENV, AUTO_CREATE_TABLES, DEBUG
from .core.database import init_db
from .core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if AUTO_CREATE_TABLES:
        init_db()
    logger.info("TuChonga API started (env=%s)", APP_ENV)
    yield


app = FastAPI(title="TuChonga API", version="1.0.0", lifespan=lifespan)


class ForceUTF8Middleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        ct = response.headers.get("content-type", "")
        # JSON without a charset gets utf-8
        if ct.startswith("application/json") and "charset=" not in ct:
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response


app.add_middleware(ForceUTF8Middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,  # refresh cookie
    allow_methods=["*"],
    allow_headers=["*"],
)


# unique keys raced past the service checks
@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Resource already exists or violates a constraint"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if DEBUG:
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/health")
def health():
    return {"status": "ok", "env": APP_ENV}


@app.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)


app.include_router(api_router)
