import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from payment_gateway.config import ConfigError, Settings, load_settings
from payment_gateway.ledger import OrderLedger
from payment_gateway.logging_config import configure_logging
from payment_gateway.routes import router
from payment_gateway.stripe_service import StripeProcessor

logger = logging.getLogger(__name__)

INVALID_BODY = "Cuerpo JSON inválido."


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": INVALID_BODY})


def create_app(settings: Settings, processor=None, ledger: OrderLedger = None) -> FastAPI:
    """Build the gateway app.

    The processor and ledger default to Stripe and the configured ledger
    file; tests pass stubs instead.
    """
    app = FastAPI(title="BigFood Payment Gateway")

    app.state.settings = settings
    app.state.processor = processor or StripeProcessor(settings.stripe_secret_key)
    app.state.ledger = ledger or OrderLedger(settings.ledger_file, lock=settings.ledger_lock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(router)
    return app


def run():
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging()
        logger.critical("Startup aborted: %s", e)
        sys.exit(1)

    configure_logging(settings.log_level)
    app = create_app(settings)

    logger.info("BigFood server listening on port %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
