"""
Execution of the high-level operations as HTTP requests.

Every operation is mapped to an HTTP method, a content type, and the changes
of the URL and of the payload. The mapping is fixed and exhaustive: every
operation has its HTTP method and its content type in the tables below.

The execution is strictly sequential: resolve the context (by the decorator),
build the URL, adjust the method/headers/query/payload, send, and interpret.
"""
import dataclasses
import enum
import urllib.parse
from typing import Any, Dict, FrozenSet, Mapping, Optional

from kubefluent._cogs.clients import api, auth, errors, paths
from kubefluent._cogs.helpers import typedefs
from kubefluent._cogs.structs import filtering, kinds, patches

JSON_CONTENT_TYPE = 'application/json'
JSON_PATCH_CONTENT_TYPE = 'application/json-patch+json'
MERGE_PATCH_CONTENT_TYPE = 'application/merge-patch+json'
APPLY_PATCH_CONTENT_TYPE = 'application/apply-patch+yaml'

STATUS_NOT_FOUND_NOTE = "(NOTE: This error is expected if the resource has no status subresource)"

# The subresources served only for some kinds. Other subresources (e.g. "log") are not checked.
SUBRESOURCE_KINDS: Mapping[str, FrozenSet[str]] = {
    'proxy': frozenset({'Pod', 'Service', 'Node'}),
    'scale': frozenset({'Deployment', 'ReplicaSet', 'StatefulSet'}),
}


class SubresourceNotSupported(ValueError):
    pass


class Operation(str, enum.Enum):
    GET = 'GET'
    CREATE = 'CREATE'
    DELETE = 'DELETE'
    EVICT = 'EVICT'
    PATCH = 'PATCH'
    PATCH_STATUS = 'PATCH_STATUS'
    APPLY = 'APPLY'
    FORCEAPPLY = 'FORCEAPPLY'
    RAW = 'RAW'

    @property
    def http_method(self) -> str:
        return HTTP_METHODS[self]

    @property
    def content_type(self) -> str:
        return CONTENT_TYPES[self]


HTTP_METHODS: Mapping[Operation, str] = {
    Operation.GET: 'GET',
    Operation.CREATE: 'POST',
    Operation.DELETE: 'DELETE',
    Operation.EVICT: 'POST',
    Operation.PATCH: 'PATCH',
    Operation.PATCH_STATUS: 'PATCH',
    Operation.APPLY: 'PATCH',
    Operation.FORCEAPPLY: 'PATCH',
    Operation.RAW: 'GET',  # unless overridden by the caller
}

CONTENT_TYPES: Mapping[Operation, str] = {
    Operation.GET: JSON_CONTENT_TYPE,
    Operation.CREATE: JSON_CONTENT_TYPE,
    Operation.DELETE: JSON_CONTENT_TYPE,
    Operation.EVICT: JSON_CONTENT_TYPE,
    Operation.PATCH: JSON_PATCH_CONTENT_TYPE,
    Operation.PATCH_STATUS: MERGE_PATCH_CONTENT_TYPE,
    Operation.APPLY: APPLY_PATCH_CONTENT_TYPE,
    Operation.FORCEAPPLY: APPLY_PATCH_CONTENT_TYPE,
    Operation.RAW: JSON_CONTENT_TYPE,
}


@dataclasses.dataclass(frozen=True)
class ApplyOptions:
    force: bool = False
    """
    Take over the fields owned by other field managers instead of failing
    with HTTP 409 Conflict. Use it only when this manager is the intended owner.
    """


def extend_url(
        url: str,
        *,
        subresource: Optional[str] = None,
        port: Optional[int] = None,
        params: Optional[Mapping[str, str]] = None,
) -> str:
    parsed = urllib.parse.urlsplit(url)
    path = parsed.path
    if port is not None:
        path = path.rstrip('/') + f':{port}'
    if subresource:
        path = path.rstrip('/') + '/' + subresource
    query = parsed.query
    if params:
        pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True) + list(params.items())
        query = urllib.parse.urlencode(pairs, encoding='utf-8')
    return urllib.parse.urlunsplit(parsed._replace(path=path, query=query))


@auth.authenticated
async def execute(
        model: kinds.Model,
        filters: filtering.Filters,
        operation: Operation,
        payload: Optional[Any] = None,
        *,
        apply_options: Optional[ApplyOptions] = None,
        raw_path: Optional[str] = None,
        raw_method: Optional[str] = None,
        subresource: Optional[str] = None,
        proxy_port: Optional[int] = None,
        registry: Optional[kinds.KindRegistry] = None,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
        logger: typedefs.Logger,
) -> Any:
    if context is None:  # for type-checking!
        raise RuntimeError("API instance is not injected by the decorator.")

    if operation is Operation.PATCH and not payload:
        raise patches.EmptyOperationsError("No operations specified")

    options = context.prepare(raw_method or operation.http_method)
    options.headers['Content-Type'] = operation.content_type

    extra: Optional[Dict[str, Any]] = None
    if operation is Operation.RAW:
        if raw_path is None:
            raise ValueError("A path is required for raw requests.")
        url = context.server.rstrip('/') + '/' + raw_path.lstrip('/')
    else:
        exclude_name = operation is Operation.CREATE
        url = paths.build_url(context.server, model, filters, exclude_name, registry=registry)
        matched_kind = paths.resolve_kind(model, filters, registry=registry)
        extra = {'k8s_ref': {
            'apiVersion': matched_kind.api_version,
            'kind': matched_kind.kind,
            'name': filters.name,
            'namespace': filters.namespace,
        }}

        # Evictions and subresources always address one named object.
        if (operation is Operation.EVICT or subresource) and not filters.name:
            raise filtering.NameNotSpecified(f"Name not specified for {matched_kind.kind}")
        if subresource:
            supported = SUBRESOURCE_KINDS.get(subresource)
            if supported is not None and matched_kind.kind not in supported:
                raise SubresourceNotSupported(
                    f"The {subresource!r} subresource is only supported for "
                    f"{', '.join(sorted(supported))}, not for {matched_kind.kind}.")
            url = extend_url(url, subresource=subresource, port=proxy_port)

    if operation is Operation.EVICT:
        metadata = {'name': filters.name, 'namespace': filters.namespace}
        payload = {
            'apiVersion': 'policy/v1',
            'kind': 'Eviction',
            'metadata': {key: val for key, val in metadata.items() if val is not None},
        }
    elif operation is Operation.PATCH_STATUS:
        url = extend_url(url, subresource='status')
        payload = {'status': (payload or {}).get('status')}
    elif operation in (Operation.APPLY, Operation.FORCEAPPLY):
        force = operation is Operation.FORCEAPPLY or bool(apply_options and apply_options.force)
        url = extend_url(url, params={
            'fieldManager': context.settings.apply.field_manager,
            'fieldValidation': context.settings.apply.field_validation,
            'force': 'true' if force else 'false',
        })

    try:
        return await api.request(
            method=options.method,
            url=url,
            payload=payload,
            headers=options.headers,
            context=context,
            logger=logger,
            extra=extra,
        )
    except errors.APINotFoundError as e:
        if operation is not Operation.PATCH_STATUS:
            raise
        status_text = f"{e.status_text or 'Not Found'} {STATUS_NOT_FOUND_NOTE}"
        raise errors.APINotFoundError(e.data, status=e.status, status_text=status_text) from e
