"""A list which only holds models"""
from .errors import InvalidArgument
from .model import Model

__all__ = ["Collection"]


def _check(items):
    items = list(items)
    if any(not isinstance(item, Model) for item in items):
        raise InvalidArgument(
            "A collection may only contain instances of Model"
        )
    return items


class Collection(list):
    """A homogeneous list of :class:`~consume.model.Model` instances,
    in the order the API returned them.

    Parameters
    ----------
    items: ~typing.Iterable[Model]
        the models. If any item is not a model,
        :class:`~consume.errors.InvalidArgument` is raised
        and no collection is created.
    """

    __slots__ = ()

    def __init__(self, items=()):
        super().__init__(_check(items))

    def append(self, item):
        super().append(*_check([item]))

    def insert(self, index, item):
        super().insert(index, *_check([item]))

    def extend(self, items):
        super().extend(_check(items))

    def __iadd__(self, items):
        return super().__iadd__(_check(items))

    def __setitem__(self, index, value):
        if isinstance(index, slice):
            value = _check(value)
        else:
            (value,) = _check([value])
        super().__setitem__(index, value)

    def __repr__(self):
        return "{}({})".format(type(self).__name__, super().__repr__())
