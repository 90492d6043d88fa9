"""Models: remote resources holding persisted data and unsaved changes

A model keeps two maps. The *baseline* is the state last confirmed by the
API, the *overlay* holds local edits not yet saved. Reads prefer the overlay.
Any field name works as an attribute, as long as it does not collide with
a real member of the class (methods, ``stored``, ``primary_key``, ...).
Names starting with an underscore are internal and never treated as fields.
"""
import types

from .errors import UnboundConsumer

__all__ = ["Model", "create_model"]


class _Tombstone(object):
    """marks a field deleted in the overlay, pending the next save"""

    __slots__ = ()

    def __repr__(self):
        return "<deleted>"


_DELETED = _Tombstone()


def _is_internal(name):
    return name.startswith("_")


def _unbound(cls):
    return UnboundConsumer(
        "{}.consumer must be defined as an instance of "
        "Consumer".format(cls.__name__)
    )


class _hybridmethod(object):
    """A method which behaves differently on the class and on instances.

    Example
    -------

    >>> class Foo:
    ...     @_hybridmethod
    ...     def name(cls):
    ...         return 'class'
    ...
    ...     @name.instancemethod
    ...     def name(self):
    ...         return 'instance'
    ...
    >>> Foo.name(), Foo().name()
    ('class', 'instance')
    """

    def __init__(self, classfunc):
        self._classfunc = classfunc
        self._instancefunc = None
        self.__doc__ = classfunc.__doc__

    def instancemethod(self, func):
        self._instancefunc = func
        return self

    def __get__(self, obj, objtype=None):
        if obj is None:
            return types.MethodType(self._classfunc, objtype)
        return types.MethodType(self._instancefunc, obj)


class _ConsumerAttribute(object):
    """On the class: the consumer bound to it.
    On an instance: the consumer which owns the instance."""

    def __get__(self, obj, objtype=None):
        if obj is None:
            return objtype._class_consumer
        return obj._consumer

    def __set__(self, obj, value):
        obj._consumer = value


class ModelMeta(type):
    """Routes assignments of ``consumer`` on a model class
    to the class-level binding"""

    def __setattr__(cls, name, value):
        if name == "consumer":
            name = "_class_consumer"
        super().__setattr__(name, value)


class Model(metaclass=ModelMeta):
    """A single resource of a REST API.

    Parameters
    ----------
    data: ~typing.Mapping[str, object] or None
        the persisted data of the resource, if any
    consumer: ~consume.consumer.Consumer or None
        the consumer to send requests with.
        Defaults to the consumer bound to the class.
    stored: bool
        whether the resource already exists on the server

    Raises
    ------
    ~consume.errors.UnboundConsumer
        if no consumer is given and none is bound to the class

    Subclasses bind a consumer and (optionally) a primary key field
    through class keywords::

        class Book(Model, consumer=api.books, primary_key_field='isbn'):
            pass

    Note
    ----
    Saves on the same instance are not serialized.
    If two saves race, the last response to arrive determines the local state.
    """

    consumer = _ConsumerAttribute()
    _class_consumer = None
    primary_key_field = "id"

    def __init_subclass__(
        cls, consumer=None, primary_key_field=None, **kwargs
    ):
        super().__init_subclass__(**kwargs)
        declared = cls.__dict__.get("consumer")
        if declared is not None and not isinstance(
            declared, _ConsumerAttribute
        ):
            del cls.consumer
            cls.consumer = declared
        if consumer is not None:
            cls.consumer = consumer
        if primary_key_field is not None:
            cls.primary_key_field = primary_key_field

    def __init__(self, data=None, consumer=None, stored=False):
        if consumer is None:
            consumer = type(self).consumer
        if consumer is None:
            raise _unbound(type(self))
        self._consumer = consumer
        self._data = dict(data or {})
        self._changed = {}
        self._stored = stored

    @classmethod
    def _bound(cls):
        """the class's consumer, collecting results into this class"""
        if cls.consumer is None:
            raise _unbound(cls)
        return cls.consumer.child().as_model(cls)

    @classmethod
    def all(cls):
        """Retrieve all resources from the class's consumer

        Returns
        -------
        ~consume.collection.Collection
        """
        return cls._bound().all()

    @classmethod
    def find(cls, id):
        """Retrieve a resource by its identifier

        Returns
        -------
        Model or None
            the model, or ``None`` if the API answered 404
        """
        return cls._bound().find(id)

    @classmethod
    def create(cls, data):
        """Create a new resource from the given data"""
        return cls._bound().create(data)

    @_hybridmethod
    def update(cls, id, data):
        """On the class: update the resource with the given identifier.
        On an instance: merge the given data into the unsaved changes,
        and save.
        """
        return cls._bound().update(id, data)

    @update.instancemethod
    async def update(self, data):
        self._changed.update(data)
        return await self.save()

    @property
    def stored(self):
        """Whether the resource exists on the server"""
        return self._stored

    @property
    def primary_key(self):
        """The identifier of the resource, as last persisted"""
        return self._data.get(type(self).primary_key_field)

    @property
    def changes(self):
        """The unsaved changes (deleted fields excluded)"""
        return {
            key: value
            for key, value in self._changed.items()
            if value is not _DELETED
        }

    async def save(self):
        """Persist the model: create it if it is not stored yet,
        otherwise update it.

        Returns
        -------
        Model
            the model itself

        Raises
        ------
        ~consume.errors.RemoteRejection
            if the API rejects the request. The model is left untouched.
        """
        data = self._merged()
        if self._stored:
            result = await self._consumer.update(self.primary_key, data)
        else:
            result = await self._consumer.create(data)

        baseline = dict(data)
        if isinstance(result, Model):
            baseline.update(result._data)
        self._data = baseline
        self._changed = {}
        self._stored = True
        return self

    async def delete(self):
        """Delete the resource on the server. Local state is left as is.

        Returns
        -------
        bool
            whether the API reported success
        """
        return await self._consumer.delete(self.primary_key)

    def keys(self):
        """The names of all fields, persisted or not"""
        names = dict.fromkeys(self._data)
        names.update(self._changed)
        return [
            name
            for name in names
            if self._changed.get(name) is not _DELETED
        ]

    def get(self, name, default=None):
        """Read a field, returning `default` if it does not exist"""
        try:
            return self[name]
        except KeyError:
            return default

    def set(self, name, value):
        """Write a field. The change is kept until the next save."""
        self[name] = value

    def _merged(self):
        return {name: self[name] for name in self.keys()}

    def _is_member(self, name):
        return name in vars(self) or any(
            name in vars(klass) for klass in type(self).__mro__
        )

    def __getitem__(self, name):
        if name in self._changed:
            value = self._changed[name]
        elif name in self._data:
            value = self._data[name]
        else:
            raise KeyError(name)
        if value is _DELETED:
            raise KeyError(name)
        return value

    def __setitem__(self, name, value):
        self._changed[name] = value

    def __delitem__(self, name):
        if name not in self:
            raise KeyError(name)
        if name in self._data:
            self._changed[name] = _DELETED
        else:
            del self._changed[name]

    def __contains__(self, name):
        return name in self.keys()

    def __iter__(self):
        return iter(self.keys())

    def __getattr__(self, name):
        # only reached if no real member exists
        if _is_internal(name):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError("Unknown field {!r}".format(name)) from None

    def __setattr__(self, name, value):
        if _is_internal(name) or self._is_member(name):
            super().__setattr__(name, value)
        else:
            self[name] = value

    def __delattr__(self, name):
        if _is_internal(name) or self._is_member(name):
            super().__delattr__(name)
            return
        try:
            del self[name]
        except KeyError:
            raise AttributeError("Unknown field {!r}".format(name)) from None

    def __dir__(self):
        members = (n for n in super().__dir__() if not _is_internal(n))
        return sorted(set(members).union(self.keys()))

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return (self._merged(), self._stored) == (
                other._merged(),
                other._stored,
            )
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return "<{0.__class__.__name__}: {1!r}{2}>".format(
            self, self._merged(), "" if self._stored else " (unsaved)"
        )


def create_model(name, consumer, primary_key_field="id", **members):
    """Create a model class bound to a consumer

    Parameters
    ----------
    name: str
        the class name
    consumer: ~consume.consumer.Consumer
        the consumer to bind
    primary_key_field: str
        the field identifying a resource
    **members
        methods and attributes to add to the class

    Returns
    -------
    type
        a subclass of :class:`Model`

    Example
    -------

    >>> Book = create_model('Book', api.books,
    ...                     shout=lambda self: self.title.upper())
    >>> book = await Book.find(1)
    >>> book.shout()
    'THE GREAT GATSBY'
    """
    return types.new_class(
        name,
        (Model,),
        kwds={"consumer": consumer, "primary_key_field": primary_key_field},
        exec_body=lambda ns: ns.update(members),
    )
