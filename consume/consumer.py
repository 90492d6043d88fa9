"""Consumers: handles on a REST endpoint.

Any attribute or item which is not a real member of a consumer
addresses a deeper path::

    >>> api = consume('https://api.example.com')
    >>> api.users[123].posts.url
    'https://api.example.com/users/123/posts'
"""
import json
import logging
from operator import attrgetter

from .clients import send_async
from .collection import Collection
from .errors import InvalidArgument, RemoteRejection
from .http import DELETE, GET, POST, PUT, _FrozenDict
from .model import Model

__all__ = ["Consumer", "consume", "DEFAULT_OPTIONS"]

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = _FrozenDict(
    {
        "method": "GET",
        "credentials": True,
        "headers": _FrozenDict({"Content-Type": "application/json"}),
    }
)

_REQUEST_OPTIONS = frozenset(["method", "credentials", "headers", "body"])


def _merge_options(options):
    """merge options over the defaults. Headers are merged key by key."""
    merged = dict(DEFAULT_OPTIONS)
    merged.update(options)
    headers = dict(DEFAULT_OPTIONS["headers"])
    headers.update(options.get("headers") or {})
    merged["headers"] = _FrozenDict(headers)
    return _FrozenDict(merged)


class Consumer(object):
    """A REST endpoint, able to retrieve and persist its resources.

    Parameters
    ----------
    url: str
        The base URL of the endpoint
    options: ~typing.Mapping[str, object] or None
        Request options, merged over :data:`DEFAULT_OPTIONS`.
        Given keys win, except ``headers``, which are merged.
    client
        The HTTP client to send requests with.
        Its type must have been registered
        with :func:`~consume.clients.send_async`.
        If not given, a temporary :mod:`aiohttp` session is used
        for each request.

    Raises
    ------
    ~consume.errors.InvalidArgument
        if `url` is not a non-empty string

    Note
    ----
    ``url``, ``options``, the CRUD methods, ``as_model`` and ``child``
    are real members. To address a path segment with one of these names,
    use item access (``api['update']``) or :meth:`child`.
    """

    def __init__(self, url, options=None, client=None):
        if not isinstance(url, str) or not url:
            raise InvalidArgument("URL must be a string")
        self._url = url
        self._options = _merge_options(options or {})
        self._client = client
        self._model = Model

    url = property(attrgetter("_url"))
    url.__doc__ = "The base URL"
    options = property(attrgetter("_options"))
    options.__doc__ = "The merged request options (read-only)"

    def child(self, *segments):
        """Create a consumer for a deeper path

        Parameters
        ----------
        *segments: str or int
            the path segments to append

        Returns
        -------
        Consumer
            a new consumer with the same options and client
        """
        url = "/".join([self._url] + [str(s) for s in segments])
        return type(self)(url, self._options, self._client)

    def as_model(self, model_cls):
        """Collect results into the given model class

        Parameters
        ----------
        model_cls: type
            a subclass of :class:`~consume.model.Model`

        Returns
        -------
        Consumer
            the consumer itself
        """
        if not (isinstance(model_cls, type) and issubclass(model_cls, Model)):
            raise InvalidArgument(
                "{!r} is not a subclass of Model".format(model_cls)
            )
        self._model = model_cls
        return self

    async def all(self):
        """Retrieve all resources of the endpoint

        Returns
        -------
        ~consume.collection.Collection or ~consume.model.Model or None
        """
        return self._handle(await self._send(GET(self._url, **self._prep())))

    async def find(self, id):
        """Retrieve a single resource

        Parameters
        ----------
        id: str or int
            the identifier of the resource

        Returns
        -------
        ~consume.model.Model or None
            ``None`` if the API answered 404
        """
        response = await self._send(
            GET("{}/{}".format(self._url, id), **self._prep())
        )
        return self._handle(response)

    async def create(self, data):
        """Create a new resource

        Parameters
        ----------
        data: ~typing.Mapping[str, object]
            the fields of the resource

        Returns
        -------
        ~consume.model.Model
        """
        response = await self._send(POST(self._url, **self._prep(data)))
        return self._handle(response, absent_ok=False)

    async def update(self, id, data):
        """Update an existing resource

        Parameters
        ----------
        id: str or int
            the identifier of the resource
        data: ~typing.Mapping[str, object]
            the fields of the resource

        Returns
        -------
        ~consume.model.Model
        """
        response = await self._send(
            PUT("{}/{}".format(self._url, id), **self._prep(data))
        )
        return self._handle(response, absent_ok=False)

    async def delete(self, id):
        """Delete a resource

        Parameters
        ----------
        id: str or int
            the identifier of the resource

        Returns
        -------
        bool
            whether the API reported success.
            Unsuccessful status codes are not raised.
        """
        response = await self._send(
            DELETE("{}/{}".format(self._url, id), **self._prep())
        )
        return response.ok

    def _prep(self, data=None):
        """request arguments derived from the options"""
        opts = self._options
        return {
            "content": None if data is None else json.dumps(data).encode(),
            "headers": opts["headers"],
            "credentials": opts["credentials"],
            "extra": _FrozenDict(
                (key, value)
                for key, value in opts.items()
                if key not in _REQUEST_OPTIONS
            ),
        }

    async def _send(self, request):
        logger.debug("%s %s", request.method, request.url)
        return await send_async(self._client, request)

    def _handle(self, response, absent_ok=True):
        if response.ok:
            return self._collect(response.json())
        if absent_ok and response.status_code == 404:
            return None
        logger.debug("request rejected with status %s", response.status_code)
        raise RemoteRejection(response)

    def _collect(self, data):
        """wrap decoded JSON into models"""
        if data is None:
            return None
        if isinstance(data, list):
            return Collection(self._collect(item) for item in data)
        return self._model(data, self, stored=True)

    def __getattr__(self, name):
        # only reached if no real member exists
        if name.startswith("_"):
            raise AttributeError(name)
        return self.child(name)

    def __getitem__(self, segment):
        return self.child(segment)

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return (
                self._url == other._url
                and self._options == other._options
                and self._client is other._client
                and self._model is other._model
            )
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "<{0.__class__.__name__}: {0._url}>".format(self)


def consume(url, options=None, client=None):
    """Create a consumer for an API

    Parameters
    ----------
    url: str
        the base URL of the API
    options: ~typing.Mapping[str, object] or None
        request options, see :class:`Consumer`
    client
        the HTTP client, see :class:`Consumer`

    Returns
    -------
    Consumer
    """
    return Consumer(url, options, client)
