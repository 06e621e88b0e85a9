"""Plain-text responses carrying only the HTTP reason phrase."""

from http import HTTPStatus

from starlette.responses import PlainTextResponse


def status_text_response(status_code: int) -> PlainTextResponse:
    """Build a ``text/plain`` response whose body is the status reason phrase.

    Error details never reach the client; they are logged server-side.
    """
    return PlainTextResponse(
        f"{HTTPStatus(status_code).phrase}\n",
        status_code=status_code,
        headers={"X-Content-Type-Options": "nosniff"},
    )
