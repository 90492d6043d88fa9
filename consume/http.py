"""Basic HTTP abstractions: the request passed to a client
and the response a client hands back"""
import json
from collections.abc import Mapping
from functools import partial
from operator import attrgetter

__all__ = ["Request", "Response", "GET", "POST", "PUT", "DELETE"]


class _FrozenDict(Mapping):
    __slots__ = "_inner"

    def __init__(self, inner=()):
        self._inner = dict(inner)

    __len__ = property(attrgetter("_inner.__len__"))
    __iter__ = property(attrgetter("_inner.__iter__"))
    __getitem__ = property(attrgetter("_inner.__getitem__"))
    __repr__ = property(attrgetter("_inner.__repr__"))


class _SlotsMixin(object):
    __slots__ = ()

    def _asdict(self):
        return {a: getattr(self, a) for a in self.__slots__}

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self._asdict() == other._asdict()
        return NotImplemented


class Request(_SlotsMixin):
    """A simple HTTP request.

    Parameters
    ----------
    method: str
        The http method
    url: str
        The requested url
    content: bytes or None
        The request body
    headers: Mapping
        Request headers.
    credentials
        Whether credentials (cookies, auth) should accompany the request.
        Passed through to fetch-like clients as-is.
    extra: Mapping
        Any other fetch options, passed through to fetch-like clients.
    """

    __slots__ = "method", "url", "content", "headers", "credentials", "extra"
    __hash__ = None

    def __init__(
        self,
        method,
        url,
        content=None,
        headers=_FrozenDict(),
        credentials=True,
        extra=_FrozenDict(),
    ):
        self.method = method
        self.url = url
        self.content = content
        self.headers = headers
        self.credentials = credentials
        self.extra = extra

    def options(self):
        """The fetch-style options for this request

        Returns
        -------
        dict
            the extra options, plus ``method``, ``credentials``,
            ``headers`` and (if there is content) ``body``
        """
        opts = dict(self.extra)
        opts.update({
            "method": self.method,
            "credentials": self.credentials,
            "headers": dict(self.headers),
        })
        if self.content is not None:
            opts["body"] = self.content
        return opts

    def __repr__(self):
        return ("<Request: {0.method} {0.url}, headers={0.headers!r}>").format(
            self
        )


class Response(_SlotsMixin):
    """A simple HTTP response.

    Parameters
    ----------
    status_code: int
        The HTTP status code
    content: bytes, str, or None
        The response body. Content which is neither bytes nor str
        is taken to be decoded JSON already.
    headers: Mapping
        The headers of the response.
    """

    __slots__ = "status_code", "content", "headers"
    __hash__ = None

    def __init__(self, status_code, content=None, headers=_FrozenDict()):
        self.status_code = status_code
        self.content = content
        self.headers = headers

    @property
    def ok(self):
        """Whether the status code is in the 2xx range"""
        return 200 <= self.status_code < 300

    def json(self):
        """Decode the JSON body.

        Returns
        -------
        object
            the decoded body, or ``None`` if the body is empty
        """
        if self.content is None or self.content in (b"", ""):
            return None
        if isinstance(self.content, (bytes, str)):
            return json.loads(self.content)
        return self.content

    def __repr__(self):
        return ("<Response: {0.status_code}, headers={0.headers!r}>").format(
            self
        )


GET = partial(Request, "GET")
GET.__doc__ = "Shortcut for a GET request"
POST = partial(Request, "POST")
POST.__doc__ = "Shortcut for a POST request"
PUT = partial(Request, "PUT")
PUT.__doc__ = "Shortcut for a PUT request"
DELETE = partial(Request, "DELETE")
DELETE.__doc__ = "Shortcut for a DELETE request"
