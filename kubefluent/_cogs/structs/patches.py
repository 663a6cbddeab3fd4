"""
All the structures needed for Kubernetes patching.

The JSON patches (RFC 6902) are sequences of operations as sent to the API.
The merge-patches (RFC 7386) and the server-side-apply patches are just
partial bodies, so they need no special structures.
"""
from typing import Any, List, Optional

from typing_extensions import Literal, TypedDict

JSONPatchOp = Literal["add", "remove", "replace", "move", "copy", "test"]


class EmptyOperationsError(ValueError):
    """ Raised when a JSON patch has no operations at all. """


class JSONPatchItem(TypedDict, total=False):
    op: JSONPatchOp
    path: str
    value: Optional[Any]


JSONPatch = List[JSONPatchItem]
