from typing import Any

from pydantic import BaseModel, ConfigDict


class WaitlistSignup(BaseModel):
    """Body of ``POST /api/signup``.

    ``email`` is left untyped: a number, list or null is accepted here and
    rejected by the email validator, so it yields the invalid-address response
    instead of a schema error.
    """

    model_config = ConfigDict(extra="ignore")

    email: Any = None


class WaitlistResponse(BaseModel):
    message: str


class WaitlistErrorResponse(BaseModel):
    error: str
