"""
The entire public API is available at root level::

    from consume import consume, Consumer, Model, Collection, ...
"""
from . import clients, http
from .__about__ import *  # noqa
from .clients import *  # noqa
from .collection import *  # noqa
from .consumer import *  # noqa
from .errors import *  # noqa
from .http import *  # noqa
from .model import *  # noqa

__all__ = ["clients", "http"]
