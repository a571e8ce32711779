"""
Change API - FastAPI application

Routes:
- GET  /health
- POST /change

Every request is logged once its response is ready. Unexpected errors are
answered with a JSON 500 instead of dropping the connection.
"""

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from changeapi import __version__
from changeapi.config import settings
from changeapi.routers.api import router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
log = logging.getLogger("changeapi")


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return ""


def create_app() -> FastAPI:
    app = FastAPI(
        title="Change API",
        description="Validates and acknowledges code change requests",
        version=__version__,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                f"Unhandled error on {request.method} {request.url.path}: {e}",
                exc_info=True,
            )
            response = JSONResponse(
                {"error": "internal_error", "message": "Internal server error"},
                status_code=500,
            )

        log.info(
            "Request processed "
            f"method={request.method} path={request.url.path} "
            f"status={response.status_code} ip={client_ip(request)}"
        )
        return response

    app.include_router(router)

    return app


app = create_app()


def main():
    import uvicorn

    log.info(f"Starting API server port={settings.port}")
    try:
        uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")
    except SystemExit as e:
        # uvicorn exits on its own when the socket cannot be bound
        if e.code:
            log.error(f"Failed to start server: exit code {e.code}")
        raise
    except Exception as e:
        log.error(f"Failed to start server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
