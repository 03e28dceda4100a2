import traceback
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from chauffeur_api.core.config import settings
from chauffeur_api.core.dependencies import get_mail_sender, get_vehicle_catalog
from chauffeur_api.core.errors import ApiError, RateLimitExceededError
from chauffeur_api.core.logger import get_logger
from chauffeur_api.core.middleware import REQUEST_ID_HEADER, log_requests
from chauffeur_api.core.rate_limit import limiter
from chauffeur_api.models.response import ErrorDetail, ErrorResponse
from chauffeur_api.routes.health_router import health_router
from chauffeur_api.routes.inquiry_router import inquiry_router
from chauffeur_api.routes.vehicle_router import vehicle_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    vehicles = await get_vehicle_catalog().get_vehicles()
    logger.info(f"Catalog ready with {len(vehicles)} vehicles")
    await get_mail_sender().verify_connection()

    logger.info(f"Application startup complete in {settings.ENVIRONMENT} mode")

    yield

    logger.info("Application shutdown initiated")


def _error_response(status_code: int, message: str, error: ErrorDetail = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "-")
    logger.warning(
        f"[{request_id}] Client error {exc.status_code} {exc.code} on {request.method} {request.url.path}: {exc.message}"
    )
    return _error_response(exc.status_code, exc.message, ErrorDetail(**exc.to_dict()))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return await api_error_handler(request, RateLimitExceededError(exc.limit.limit.get_expiry()))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request body: {location} {first.get('msg', '')}".strip()
    logger.warning(f"Malformed request on {request.url.path}: {errors}")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        message,
        ErrorDetail(code="invalid_request", message=message, details={"field": location} if location else None),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Route not found: {request.url.path}"
    else:
        message = str(exc.detail)
    return _error_response(exc.status_code, message, ErrorDetail(code="http_error", message=message))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    logger.exception(f"[{request_id}] Server error on {request.method} {request.url.path}: {exc}")
    error = None
    if not settings.is_production():
        error = ErrorDetail(
            code="internal_error",
            message=str(exc),
            details={"stack": traceback.format_exception(type(exc), exc, exc.__traceback__)},
        )
    # Raised errors escape the request middleware, so the id is set here
    response = _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", error)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.limiter = limiter
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)
app.include_router(health_router)
app.include_router(vehicle_router)
app.include_router(inquiry_router)


def run() -> None:
    import uvicorn

    uvicorn.run("chauffeur_api.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
