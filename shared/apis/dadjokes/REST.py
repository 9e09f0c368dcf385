import aiohttp
from yarl import URL

from .models import Dadjoke, FetchError
from ..exceptions import APIRequestError, EmptyResponseError, InvalidEndpointError, aiohttp_error_handler


__all__ = ("fetch_joke", "random_dadjoke", "validate_endpoint")


ENDPOINT = "https://icanhazdadjoke.com/"
HEADERS = {"Accept": "application/json"}


def validate_endpoint(endpoint: str) -> URL:
    """Parses the endpoint, accepting only absolute http(s) urls that name a host"""
    if not isinstance(endpoint, str) or endpoint.strip() != endpoint or not endpoint:
        raise InvalidEndpointError()
    try:
        url = URL(endpoint)
    except (TypeError, ValueError) as e:
        raise InvalidEndpointError(source=e)
    if not url.is_absolute() or url.scheme not in ("http", "https") or not url.host:
        raise InvalidEndpointError()
    return url


@aiohttp_error_handler
async def random_dadjoke(endpoint: str = ENDPOINT, timeout: aiohttp.ClientTimeout | None = None) -> Dadjoke:
    url = validate_endpoint(endpoint)
    session_options = {"headers": HEADERS}
    if timeout is not None:
        session_options["timeout"] = timeout
    async with aiohttp.ClientSession(**session_options) as session:
        async with session.get(url, raise_for_status=True) as resp:
            body = await resp.read()
    if not body.strip():
        raise EmptyResponseError()
    return Dadjoke.model_validate_json(body)


async def fetch_joke(endpoint: str = ENDPOINT, timeout: aiohttp.ClientTimeout | None = None) -> Dadjoke | FetchError:
    """Fetches a joke, returning failures as a FetchError instead of raising.

    Cancellation is not a failure and still propagates to the caller.
    """
    try:
        return await random_dadjoke(endpoint, timeout)
    except APIRequestError as e:
        return FetchError.from_exception(e)
