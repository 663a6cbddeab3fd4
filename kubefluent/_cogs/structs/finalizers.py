"""
All the functions to manipulate the object finalization and deletion.

Finalizers are used to block the actual deletion until the finalizers
are removed, meaning that the owning controller has done all its duties
to "release" the object (e.g. cleanups of the external resources).

The functions never modify the bodies. They calculate the new list
of finalizers, which the caller then sends to the API in a patch.
``None`` means that there is nothing to change, and the patch can be skipped.
"""
from typing import Any, List, Mapping, Optional

from typing_extensions import Literal

FinalizerAction = Literal["add", "remove"]


def is_deletion_blocked(
        body: Mapping[str, Any],
        finalizer: str,
) -> bool:
    finalizers = body.get('metadata', {}).get('finalizers') or []
    return finalizer in finalizers


def update_finalizers_or_skip(
        action: FinalizerAction,
        finalizer: str,
        body: Mapping[str, Any],
) -> Optional[List[str]]:
    finalizers: List[str] = list(body.get('metadata', {}).get('finalizers') or [])
    if action == 'add':
        if is_deletion_blocked(body, finalizer):
            return None
        return finalizers + [finalizer]
    elif action == 'remove':
        if not is_deletion_blocked(body, finalizer):
            return None
        return [item for item in finalizers if item != finalizer]
    else:
        raise ValueError(f"Unsupported finalizer action: {action!r}")
