import logging

from fastapi import APIRouter, Depends, Request, status

from app.api.core.exceptions import (
    INTERNAL_ERROR_MESSAGE,
    PersistenceError,
    WaitlistError,
)
from app.api.db.database import Datastore, get_datastore
from app.api.modules.waitlist.schemas.waitlist_schema import (
    WaitlistErrorResponse,
    WaitlistResponse,
    WaitlistSignup,
)
from app.api.modules.waitlist.service.waitlist_service import WaitlistService
from app.api.utils.response_payloads import error_response, success_response

router = APIRouter(tags=["Waitlist"])
logger = logging.getLogger("app")


@router.post(
    "/signup",
    response_model=WaitlistResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": WaitlistErrorResponse},
        409: {"model": WaitlistErrorResponse},
        500: {"model": WaitlistErrorResponse},
    },
)
async def signup_waitlist(
    request: Request,
    datastore: Datastore = Depends(get_datastore),
):
    """
    Add an email to the waitlist.

    Returns:
    - 200: Successfully joined the waitlist
    - 400: Missing or malformed email
    - 409: Email already registered
    - 500: Datastore error or malformed request body
    """
    try:
        payload = WaitlistSignup.model_validate(await request.json())
        result = await WaitlistService(datastore).join_waitlist(payload.email)

        return success_response(status.HTTP_200_OK, result.message)
    except PersistenceError as e:
        logger.error(f"Waitlist signup failed - datastore error: {e.detail}", exc_info=True)
        return error_response(status_code=e.status_code, error=e.message)
    except WaitlistError as e:
        return error_response(status_code=e.status_code, error=e.message)
    except Exception as e:
        logger.error(f"Unexpected error during waitlist signup: {str(e)}", exc_info=True)
        return error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=INTERNAL_ERROR_MESSAGE,
        )
