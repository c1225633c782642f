"""
Main FastAPI server module for SlideSmith.
This module initializes the FastAPI application, configures routes, CORS middleware,
and hosts the proxy endpoints used by the proxied transport.
"""

import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slidesmith.configs.config import config
from slidesmith.configs.logging_config import setup_logging
from slidesmith.core.rate_limit import add_rate_limiting
from slidesmith.routes.generation_routes import router as generation_router
from slidesmith.routes.health_routes import router as health_router

app = FastAPI(title="SlideSmith API")


@app.on_event("startup")
async def startup_event() -> None:
    """Initialize logging configuration on application startup"""
    setup_logging(config.log_level, log_file=config.log_file)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report invalid proxy bodies in the same {error} envelope as other failures"""
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"error": "; ".join(messages) or "Invalid request"},
    )


# Add rate limiting to the application
add_rate_limiting(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(generation_router)
app.include_router(health_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint that returns a welcome message"""
    return {"message": "SlideSmith Backend API"}


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", str(config.port)))
    uvicorn.run(app, host="0.0.0.0", port=port)
