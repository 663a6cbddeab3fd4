"""
All the structures coming from/to the Kubernetes API.

For strict type-checking, they are detailed to the per-field level
(e.g. `TypedDict` instead of just ``Mapping[Any, Any]``) -- as used
by the library. The callers can use arbitrary fields at runtime,
which are not declared in the type definitions at type-checking time.

The Kubernetes-originated objects are plain dicts. Arbitrary 3rd-party
classes (e.g. from the ``kubernetes`` client) are not supported as bodies.
"""
from typing import Any, List, Mapping, Optional

from typing_extensions import TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


# Populated by the server only, never authored by the callers.
class ManagedFieldEntry(TypedDict, total=False):
    manager: str
    operation: str
    apiVersion: str
    time: str
    fieldsType: str
    fieldsV1: Mapping[str, Any]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    managedFields: List[ManagedFieldEntry]
    generation: int
    resourceVersion: str
    deletionTimestamp: str
    creationTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


def get_name(body: Mapping[str, Any]) -> Optional[str]:
    return body.get('metadata', {}).get('name')


def get_namespace(body: Mapping[str, Any]) -> Optional[str]:
    return body.get('metadata', {}).get('namespace')
