import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_ddm_client
from api.routes import auth_tags, fields, roles, users, validation
from config import get_settings
from ddm_api.client import DDMClient
from ddm_api.errors import DDMApiError, DDMAuthenticationError, api_error_message
from schemas.api import ConsoleHealthResponse, HealthResponse

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting DDM Console API (backend: %s)", settings.ddm_base_url)
    yield
    logger.info("Shutting down DDM Console API")


app = FastAPI(
    title="DDM Console",
    description="Administration console for OpenEdge Dynamic Data Masking",
    version="0.1.0",
    lifespan=lifespan,
)

cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
)

app.include_router(auth_tags.router, prefix="/api/auth-tags", tags=["auth-tags"])
app.include_router(roles.router, prefix="/api/roles", tags=["roles"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(fields.router, prefix="/api/fields", tags=["fields"])
app.include_router(validation.router, prefix="/api/validation", tags=["validation"])


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

def _validation_message(error: dict) -> str:
    # Prefer the raw ValueError text over pydantic's "Value error, ..." msg
    ctx_error = (error.get("ctx") or {}).get("error")
    return str(ctx_error) if ctx_error is not None else error.get("msg", "Invalid value")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            "message": _validation_message(err),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": errors[0]["message"] if errors else "Invalid request",
            "errors": errors,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
        content={"success": False, "error": str(exc.detail)},
    )


@app.exception_handler(DDMApiError)
async def ddm_api_error_handler(request: Request, exc: DDMApiError):
    headers = None
    if isinstance(exc, DDMAuthenticationError):
        headers = {"WWW-Authenticate": 'Basic realm="DDM Console"'}
    return JSONResponse(
        status_code=exc.status_code,
        headers=headers,
        content={"success": False, "error": api_error_message(exc)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/api/health", response_model=ConsoleHealthResponse)
async def health():
    return ConsoleHealthResponse(ddm_base_url=settings.ddm_base_url)


@app.get("/api/backend-health", response_model=HealthResponse)
async def backend_health(client: DDMClient = Depends(get_ddm_client)):
    return await client.get_health()
