# presurvey/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from presurvey import config
from presurvey.errors import ApiError, UpstreamError
from presurvey.api.routes_basic import router as basic_router
from presurvey.api.routes_sample import router as sample_router
from presurvey.api.routes_routing import router as routing_router
from presurvey.api.routes_services import router as services_router
from presurvey.api.routes_planning import router as planning_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Moving Pre-Survey Backend",
    version="0.1.0",
)

# CORS totalmente abierto (demo sin cookies)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Manejo de errores: siempre {"error": ...} ----------

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.warning("Upstream failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": "upstream_failed", "hint": str(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        error = "not_found"
    elif exc.status_code == 405:
        error = "method_not_allowed"
    else:
        error = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": error})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "server_error", "message": str(exc)})


# Routers
app.include_router(basic_router)
app.include_router(sample_router, prefix="/api")
app.include_router(routing_router, prefix="/api")
app.include_router(services_router, prefix="/api")
app.include_router(planning_router, prefix="/api")
