"""Functions for dealing with HTTP clients in a unified manner"""
import inspect
import logging
from collections.abc import Callable
from functools import singledispatch

from .http import Response

__all__ = ["send_async"]

logger = logging.getLogger(__name__)


@singledispatch
def send_async(client, request):
    """Given a client, send a :class:`~consume.http.Request`,
    returning an awaitable :class:`~consume.http.Response`.

    A :func:`~functools.singledispatch` function.

    Parameters
    ----------
    client: any registered client type
        The client with which to send the request.

        Client types supported by default:

        * any callable with a ``fetch``-like signature:
          ``client(url, options)``, where ``options`` holds ``method``,
          ``credentials``, ``headers`` and optionally ``body``.
          It must return a :class:`~consume.http.Response`
          (or an awaitable of one).
        * :class:`aiohttp.ClientSession`
          (if `aiohttp <http://aiohttp.readthedocs.io/>`_ is installed)
        * :class:`httpx.AsyncClient`
          (if `httpx <https://www.python-httpx.org/>`_ is installed)
        * ``None``: a throwaway :class:`aiohttp.ClientSession`
          is opened for the request (if aiohttp is installed)

    request: Request
        The request to send

    Returns
    -------
    Response
        the resulting response


    Example of registering a new HTTP client:

    >>> @send_async.register(MyClientClass)
    ... async def _send(client, request: Request) -> Response:
    ...     r = await client.send(request)
    ...     return Response(r.status, r.read(), headers=r.get_headers())
    """
    raise TypeError("client {!r} not registered".format(client))


@send_async.register(Callable)
async def _fetch_send(fetch, req):
    """Send a request through a fetch-like callable"""
    logger.debug("fetching %s %s", req.method, req.url)
    response = fetch(req.url, req.options())
    if inspect.isawaitable(response):
        response = await response
    return response


try:
    import aiohttp
except ImportError:  # pragma: no cover
    pass
else:

    @send_async.register(aiohttp.ClientSession)
    async def _aiohttp_send(session, req):
        """send a request with the `aiohttp` library"""
        logger.debug("sending %s %s with aiohttp", req.method, req.url)
        async with session.request(
            req.method, req.url, data=req.content, headers=dict(req.headers)
        ) as resp:
            return Response(
                resp.status, content=await resp.read(), headers=resp.headers
            )

    @send_async.register(type(None))
    async def _default_send(_, req):
        """send a request with a one-off `aiohttp` session"""
        async with aiohttp.ClientSession() as session:
            return await _aiohttp_send(session, req)


try:
    import httpx
except ImportError:  # pragma: no cover
    pass
else:

    @send_async.register(httpx.AsyncClient)
    async def _httpx_send(client, req):
        """send a request with the `httpx` library"""
        logger.debug("sending %s %s with httpx", req.method, req.url)
        resp = await client.request(
            req.method, req.url, content=req.content, headers=dict(req.headers)
        )
        return Response(
            resp.status_code, content=resp.content, headers=resp.headers
        )
