"""
Removal of the server-populated fields from the previously read objects.

When an object is read, modified, and sent back (e.g. via server-side apply),
the fields populated by the server must not be echoed back: the API rejects
some of them outright (e.g. ``managedFields`` in the applied configurations),
and others would claim the ownership of the server's own fields.
"""
from typing import Any, MutableMapping

CONTROLLER_FIELDS = (
    'managedFields',
    'uid',
    'creationTimestamp',
    'generation',
    'finalizers',
)


def remove_controller_fields(body: MutableMapping[str, Any]) -> None:
    metadata = body.get('metadata')
    if metadata is None:
        return
    for field in CONTROLLER_FIELDS:
        metadata.pop(field, None)
