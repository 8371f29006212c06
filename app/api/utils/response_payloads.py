from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success_response(status_code: int, message: str) -> JSONResponse:
    """
    Create a JSON response for successful requests.

    Args:
        status_code (int): HTTP status code to return (e.g. 200).
        message (str): Human-readable description of the result.

    Returns:
        JSONResponse: ``{"message": <message>}``
    """

    return JSONResponse(status_code=status_code, content=jsonable_encoder({"message": message}))


def error_response(*, status_code: int, error: str) -> JSONResponse:
    """
    Create a JSON response for failed requests.

    Args:
        status_code (int): HTTP status code representing the error (e.g. 400, 409, 500).
        error (str): Human-readable error description shown to the visitor.

    Returns:
        JSONResponse: ``{"error": <error>}``
    """

    return JSONResponse(status_code=status_code, content=jsonable_encoder({"error": error}))
