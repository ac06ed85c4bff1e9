"""HTTP status classification for response bodies."""

from __future__ import annotations

from enum import Enum
import logging

from ollamakit.endpoint.codec import JsonCodec

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Unauthorized"


class StatusClass(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    OTHER_ERROR = "other_error"

    @property
    def is_error(self) -> bool:
        return self is not StatusClass.SUCCESS

    @property
    def reads_body(self) -> bool:
        # 401 bodies are not structured consistently upstream, so they are never read.
        return self is not StatusClass.UNAUTHORIZED


_BY_CODE = {
    200: StatusClass.SUCCESS,
    400: StatusClass.BAD_REQUEST,
    401: StatusClass.UNAUTHORIZED,
    404: StatusClass.NOT_FOUND,
}


def classify(status_code: int) -> StatusClass:
    status = _BY_CODE.get(status_code, StatusClass.OTHER_ERROR)
    if status is StatusClass.NOT_FOUND:
        logger.warning("Status code: 404 (Not Found)")
    elif status is StatusClass.UNAUTHORIZED:
        logger.warning("Status code: 401 (Unauthorized)")
    elif status is StatusClass.BAD_REQUEST:
        logger.warning("Status code: 400 (Bad Request)")
    elif status is StatusClass.OTHER_ERROR:
        logger.warning("Status code: %s", status_code)
    return status


def error_text(status: StatusClass, line: str, codec: JsonCodec) -> str:
    """Extract the message carried by one line of an error body."""
    if status is StatusClass.UNAUTHORIZED:
        return UNAUTHORIZED_MESSAGE
    if status in (StatusClass.NOT_FOUND, StatusClass.BAD_REQUEST):
        return codec.error_message(line)
    if status is StatusClass.OTHER_ERROR:
        return line
    raise ValueError("Success responses carry no error text.")
