"""
URL building for the resources: from a kind and the filters to a full URL.

The selectors are a part of the wire contract with the API: ``key=value``
or a bare ``key`` (an existence check), comma-joined into one query value.
"""
import urllib.parse
from typing import Dict, List, Mapping, Optional

from kubefluent._cogs.structs import filtering, kinds


def resolve_kind(
        model: kinds.Model,
        filters: filtering.Filters,
        *,
        registry: Optional[kinds.KindRegistry] = None,
) -> kinds.ResourceKind:
    registry = registry if registry is not None else kinds.get_default_registry()
    matched_kind = filters.kind_override or registry.resolve(model)
    if matched_kind is None:
        raise kinds.KindNotSpecified(f"Kind not specified for {kinds.model_name(model)}")
    return matched_kind


def encode_selector(selector: Mapping[str, str]) -> str:
    # Exists set-based operators only include the key.
    # See https://kubernetes.io/docs/concepts/overview/working-with-objects/labels/#set-based-requirement
    return ','.join(f'{key}={value}' if value else key for key, value in selector.items())


def build_url(
        server: str,
        model: kinds.Model,
        filters: filtering.Filters,
        exclude_name: bool = False,
        *,
        registry: Optional[kinds.KindRegistry] = None,
) -> str:
    matched_kind = resolve_kind(model, filters, registry=registry)

    base = '/api/v1'
    if matched_kind.group:
        if not matched_kind.version:
            raise kinds.VersionNotSpecified(f"Version not specified for {kinds.model_name(model)}")
        base = f'/apis/{matched_kind.group}/{matched_kind.version}'

    parts: List[Optional[str]] = [
        base,
        f'namespaces/{filters.namespace}' if filters.namespace else None,
        matched_kind.resource_plural,
        None if exclude_name else filters.name,
    ]
    path = '/'.join([part for part in parts if part])

    params: Dict[str, str] = {}
    if filters.fields:
        params['fieldSelector'] = encode_selector(filters.fields)
    if filters.labels:
        params['labelSelector'] = encode_selector(filters.labels)

    query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
    url = path + ('?' if query else '') + query
    return server.rstrip('/') + '/' + url.lstrip('/')
