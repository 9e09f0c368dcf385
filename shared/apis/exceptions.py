import asyncio
from enum import StrEnum
from functools import wraps

import aiohttp
from pydantic import ValidationError


class FetchErrorKind(StrEnum):
    INVALID_ENDPOINT = "invalid_endpoint"
    TRANSPORT = "transport"
    EMPTY_RESPONSE = "empty_response"
    DECODE = "decode"
    UNEXPECTED = "unexpected"


class APIRequestError(Exception):
    kind = FetchErrorKind.UNEXPECTED
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None, source: Exception | None = None):
        self.message = message if message is not None else self.default_message
        self.source = source
        super().__init__(self.message)


class InvalidEndpointError(APIRequestError):
    kind = FetchErrorKind.INVALID_ENDPOINT
    default_message = "The URL provided is incorrect."


class TransportError(APIRequestError):
    kind = FetchErrorKind.TRANSPORT
    default_message = "The connection to the server failed."


class EmptyResponseError(APIRequestError):
    kind = FetchErrorKind.EMPTY_RESPONSE
    default_message = "The response from the server was invalid."


class DecodeError(APIRequestError):
    kind = FetchErrorKind.DECODE
    default_message = "The JSON data could not be parsed."


class UnexpectedError(APIRequestError):
    pass


def describe(error: BaseException) -> str:
    """Human readable description of a library exception, falling back to its type name"""
    description = str(error).strip()
    if not description:
        return type(error).__name__
    return description


def aiohttp_error_handler(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except aiohttp.ClientResponseError as e:
            raise TransportError(f"An api request failed: {e.message} (status: {e.status})", e)
        except aiohttp.ClientPayloadError as e:
            raise TransportError(f"Payload error: {describe(e)}", e)
        except aiohttp.ClientError as e:
            raise TransportError(describe(e), e)
        except asyncio.TimeoutError as e:
            raise TransportError("Request timed out. Try again later", e)
        except ValidationError as e:
            raise DecodeError(source=e)
        # Propagate already handled exception
        except APIRequestError as e:
            raise e
        except Exception as e:
            raise UnexpectedError(source=e)

    return wrapper
