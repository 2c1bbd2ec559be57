"""
Parque Valet - FastAPI Backend
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from valet import __version__
from valet.config import get_settings
from valet.middleware.logging_middleware import LoggingMiddleware
from valet.routes import health, payments, sms, tickets, webhooks
from valet.utils.errors import ValetError
from valet.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"

app = FastAPI(
    title="Parque Valet",
    description="Guest ticket status, car requests and payments",
    version=__version__
)

# Middleware order matters: executed bottom to top
# 1. CORS (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Logging (request/response)
app.add_middleware(LoggingMiddleware)


@app.exception_handler(ValetError)
async def valet_error_handler(request: Request, exc: ValetError):
    """Client errors carry their message; server errors stay generic"""
    if exc.is_server_error:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"error": GENERIC_SERVER_ERROR})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are 400 with a readable message"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})


app.include_router(payments.router)
app.include_router(webhooks.router)
app.include_router(tickets.router)
app.include_router(sms.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "Parque Valet API", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.fastapi_host, port=settings.fastapi_port)
