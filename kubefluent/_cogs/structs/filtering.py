"""
Request filters: which objects of a kind are addressed by a request.

The filters are immutable: every modification returns a new filters object.
The name and the namespace are write-once: once set, they cannot be changed
by the chained calls -- it is most likely a mistake in the caller's code
when the namespace is narrowed twice.
"""
import dataclasses
from typing import Mapping, Optional

from kubefluent._cogs.structs import kinds


class NamespaceAlreadySpecified(ValueError):
    pass


class NameAlreadySpecified(ValueError):
    pass


class NameNotSpecified(ValueError):
    pass


@dataclasses.dataclass(frozen=True)
class Filters:
    name: Optional[str] = None
    namespace: Optional[str] = None
    labels: Optional[Mapping[str, str]] = None
    fields: Optional[Mapping[str, str]] = None
    kind_override: Optional[kinds.ResourceKind] = None

    def with_namespace(self, namespace: str) -> "Filters":
        if self.namespace:
            raise NamespaceAlreadySpecified(f"Namespace already specified: {self.namespace}")
        return dataclasses.replace(self, namespace=namespace)

    def with_name(self, name: str) -> "Filters":
        if self.name:
            raise NameAlreadySpecified(f"Name already specified: {self.name}")
        return dataclasses.replace(self, name=name)

    def with_label(self, key: str, value: str = '') -> "Filters":
        return dataclasses.replace(self, labels=dict(self.labels or {}, **{key: value}))

    def with_field(self, path: str, value: str) -> "Filters":
        return dataclasses.replace(self, fields=dict(self.fields or {}, **{path: value}))

    def synced(self, *, name: Optional[str], namespace: Optional[str]) -> "Filters":
        """ Fill the name & namespace from an object's metadata, unless already set. """
        return dataclasses.replace(
            self,
            name=self.name or name,
            namespace=self.namespace or namespace,
        )
