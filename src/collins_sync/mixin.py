"""
Collins mixin.

Any class including CollinsMixin must implement collins_asset to convert its
objects to Collins assets. The class can then use collins_get, collins_set and
the accessors declared with collins_attr_accessor.

Accessors
Collins can hold arbitrary facts, so accessors are declared by name instead
of written by hand. Each class keeps a registry table of name to accessor
pair. Subclasses start from a copy of the parent table.

Every including class gets these accessors:
primary_role, secondary_role, pool, status, state

Example

    class Pool(CollinsMixin):
        def __init__(self, name, context):
            self.name = name
            self.collins_context = context

        def collins_asset(self):
            return self.collins_context.get_asset(self.name)

    Pool.collins_attr_accessor("slave_weight")
    pool.collins_write("pool", "users")
    pool.collins_read("pool")  # "users"
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping

from collins_sync.core.errors import CapabilityError, ConfigurationError, UnknownAttribute
from collins_sync.core.types import CollinsAsset
from collins_sync.engine.attributes import AttributeEngine
from collins_sync.engine.context import CollinsContext

BASELINE_ACCESSORS = ("primary_role", "secondary_role", "pool", "status", "state")


@dataclass(frozen=True)
class AttributeAccessor:
    """Getter and setter pair for one Collins field."""

    name: str
    getter: Callable[["CollinsMixin"], str]
    setter: Callable[["CollinsMixin", Any], None]


def _make_accessor(name: str) -> AttributeAccessor:
    def getter(obj: "CollinsMixin") -> str:
        return str(obj.collins_get(name) or "").lower()

    def setter(obj: "CollinsMixin", value: Any) -> None:
        obj.collins_set(name, value)

    return AttributeAccessor(name=name, getter=getter, setter=setter)


class CollinsMixin:
    """
    Collins capability for domain objects.

    collins_context
    The CollinsContext used by this object. Usually set in __init__.
    """

    collins_context: CollinsContext | None = None

    _collins_accessors: ClassVar[dict[str, AttributeAccessor]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._collins_accessors = dict(cls._collins_accessors)
        cls.collins_attr_accessor(*BASELINE_ACCESSORS)

    @classmethod
    def collins_attr_accessor(cls, *fields: str) -> None:
        """Declare accessors for the given Collins fields on this class."""
        for field_name in fields:
            cls._collins_accessors[field_name] = _make_accessor(field_name)

    @classmethod
    def collins_accessors(cls) -> Mapping[str, AttributeAccessor]:
        return MappingProxyType(cls._collins_accessors)

    def collins_asset(self) -> CollinsAsset | None:
        raise CapabilityError(
            f"{type(self).__name__} includes CollinsMixin but does not implement collins_asset"
        )

    def _collins_engine(self) -> AttributeEngine:
        if self.collins_context is None:
            raise ConfigurationError(f"{self}: no CollinsContext bound")
        return AttributeEngine(self.collins_context)

    def collins_get(self, *field_names: Any) -> Any:
        """
        Read fields from Collins.

        One field returns a value, several fields or a list return a dict
        that also holds the asset under "asset".
        """
        return self._collins_engine().get(self, *field_names)

    def collins_set(self, *args: Any) -> None:
        """Write a mapping of fields, or one field and value, to Collins."""
        self._collins_engine().set(self, *args)

    def _accessor(self, name: str) -> AttributeAccessor:
        try:
            return self._collins_accessors[name]
        except KeyError:
            raise UnknownAttribute(f"{type(self).__name__} has no Collins accessor for {name}") from None

    def collins_read(self, name: str) -> str:
        """Read a declared field, lower cased, "" when unset."""
        return self._accessor(name).getter(self)

    def collins_write(self, name: str, value: Any) -> None:
        """Write a declared field through collins_set."""
        self._accessor(name).setter(self, value)


CollinsMixin.collins_attr_accessor(*BASELINE_ACCESSORS)
