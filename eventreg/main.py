import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from eventreg.config import get_settings
from eventreg.database import Base, engine
from eventreg.errors import AppError, ValidationError
from eventreg.logging_config import setup_logging
from eventreg.ratelimit import FixedWindowRateLimiter
from eventreg.routes import router
from eventreg import models  # noqa: F401  (registers tables on Base)

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Event Registration API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

rate_limiter = FixedWindowRateLimiter(settings.rate_limit_per_hour, window_s=3600)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


@app.middleware("http")
async def rate_limit_and_headers(request: Request, call_next):
    client = request.client.host if request.client else "unknown"
    if not rate_limiter.allow(client):
        response = JSONResponse(
            status_code=429,
            content={"message": "Too many requests from this IP, please try again in an hour"},
        )
    else:
        response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message, "code": exc.code})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{loc}: {first.get('msg')}" if loc else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message, "code": ValidationError.code})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # Details stay in the log; clients get a generic body.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


Base.metadata.create_all(bind=engine)
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

app.include_router(router)
app.mount("/files", StaticFiles(directory=settings.upload_dir, check_dir=False), name="files")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=4242)
