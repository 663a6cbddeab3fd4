from typing import Any, Mapping, Optional

import aiohttp

from kubefluent._cogs.clients import auth, errors
from kubefluent._cogs.helpers import typedefs


@auth.authenticated
async def get_default_namespace(
        *,
        context: Optional[auth.APIContext] = None,
) -> Optional[str]:
    if context is None:
        raise RuntimeError("API instance is not injected by the decorator.")
    return context.default_namespace


@auth.authenticated
async def request(
        method: str,
        url: str,  # relative to the server/api root, or absolute.
        *,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
        logger: typedefs.Logger,
        extra: Optional[Mapping[str, Any]] = None,
) -> Any:
    """
    Perform one HTTP request and return the parsed body of the response.

    There are no retries: every failure is escalated to the caller at once,
    either as :class:`errors.APIError` for HTTP statuses 400 and above,
    or as the aiohttp's (or asyncio's) errors for the connection issues.
    """
    if context is None:  # for type-checking!
        raise RuntimeError("API instance is not injected by the decorator.")

    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')

    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=context.settings.networking.request_timeout,
            sock_connect=context.settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    logger.debug(f"Requesting: {what}", extra=extra)
    try:
        async with context.session.request(
            method=method,
            url=url,
            json=payload,
            headers=headers,
            timeout=timeout,
        ) as response:
            return await errors.parse_response(response)
    except errors.APIError as e:
        logger.debug(f"Request failed: {what} -> {e.status} {e.status_text}", extra=extra)
        raise
