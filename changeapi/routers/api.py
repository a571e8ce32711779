import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from changeapi.validation import ChangeValidator, get_change_validator

router = APIRouter()

SERVICE_NAME = "demo-app"

log = logging.getLogger("changeapi")


@router.get("/health")
def health_check():
    """Health check endpoint for load balancers"""
    log.info("Health check requested")
    return {"status": "healthy", "service": SERVICE_NAME}


@router.post("/change")
async def submit_change(
    request: Request,
    validator: ChangeValidator = Depends(get_change_validator),
):
    """
    Accept a change request.

    The raw body is validated here instead of through a typed parameter so
    that malformed payloads are answered with ``400 invalid_request`` like
    every other validation failure.
    """
    body = await request.body()
    result = validator.validate(body)

    if not result.accepted:
        return JSONResponse(result.to_dict(), status_code=400)

    return result.to_dict()
