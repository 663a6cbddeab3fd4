"""
The fluent builder: the filters are accumulated by the chained calls,
and the terminal coroutines send the requests via the executor.

Usage::

    pods = await K8s(kind.Pod).in_namespace('default').with_label('app', 'web').get()
    await K8s(kind.Pod).in_namespace('default').delete('web-0')

Every chained call returns a new builder with new filters; the original
builder is never modified, so it can be kept as a base for other chains.
"""
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from kubefluent._cogs.clients import auth, errors, executing
from kubefluent._cogs.helpers import typedefs
from kubefluent._cogs.structs import bodies, filtering, kinds, patches

requests_logger = logging.getLogger('kubefluent.requests')

ObjectOrName = Union[Mapping[str, Any], str]


class K8s:
    """
    A builder of the requests for one kind of resources.

    The ``model`` is either a :class:`ResourceKind`, or a model class or a name
    registered in the kind registry (e.g. ``"Pod"`` or ``"V1Pod"``).
    The ``context`` is used for all requests of this builder and its
    derivatives; if not set, the ambient or discovered context is used.
    """

    def __init__(
            self,
            model: kinds.Model,
            filters: Optional[filtering.Filters] = None,
            *,
            context: Optional[auth.APIContext] = None,
            registry: Optional[kinds.KindRegistry] = None,
            logger: Optional[typedefs.Logger] = None,
    ) -> None:
        super().__init__()
        self.model = model
        self.filters = filters if filters is not None else filtering.Filters()
        self.context = context
        self.registry = registry
        self.logger = logger if logger is not None else requests_logger

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({kinds.model_name(self.model)!r}, {self.filters!r})'

    def _derive(self, filters: filtering.Filters) -> "K8s":
        return self.__class__(
            self.model,
            filters,
            context=self.context,
            registry=self.registry,
            logger=self.logger,
        )

    def with_field(self, path: str, value: str) -> "K8s":
        return self._derive(self.filters.with_field(path, value))

    def with_label(self, key: str, value: str = '') -> "K8s":
        return self._derive(self.filters.with_label(key, value))

    def in_namespace(self, namespace: str) -> "K8s":
        return self._derive(self.filters.with_namespace(namespace))

    async def _execute(
            self,
            filters: filtering.Filters,
            operation: executing.Operation,
            payload: Optional[Any] = None,
            **kwargs: Any,
    ) -> Any:
        # The context is not passed if not set: the decorator then finds one on its own.
        if self.context is not None:
            kwargs['context'] = self.context
        return await executing.execute(
            self.model,
            filters,
            operation,
            payload,
            registry=self.registry,
            logger=self.logger,
            **kwargs,
        )

    def _targeted(self, obj_or_name: Optional[ObjectOrName]) -> filtering.Filters:
        if obj_or_name is None:
            return self.filters
        elif isinstance(obj_or_name, str):
            if self.filters.name == obj_or_name:
                return self.filters
            return self.filters.with_name(obj_or_name)
        else:
            return self.filters.synced(
                name=bodies.get_name(obj_or_name),
                namespace=bodies.get_namespace(obj_or_name),
            )

    async def get(self, name: Optional[str] = None) -> Any:
        """
        Get one object by its name, or a list object with all matching objects.
        """
        filters = self.filters.with_name(name) if name is not None else self.filters
        return await self._execute(filters, executing.Operation.GET)

    async def create(self, obj: Mapping[str, Any]) -> Any:
        filters = self._targeted(obj)
        payload = self._with_kind(filters, obj)
        return await self._execute(filters, executing.Operation.CREATE, payload)

    async def delete(self, obj_or_name: Optional[ObjectOrName] = None) -> Any:
        """
        Delete an object; an already absent object is not an error (``None``).
        """
        filters = self._targeted(obj_or_name)
        try:
            return await self._execute(filters, executing.Operation.DELETE)
        except errors.APINotFoundError:
            return None

    async def evict(self, obj_or_name: ObjectOrName) -> Any:
        """
        Evict a pod; an already absent pod is not an error (``None``).
        """
        filters = self._targeted(obj_or_name)
        try:
            return await self._execute(filters, executing.Operation.EVICT)
        except errors.APINotFoundError:
            return None

    async def patch(self, operations: Sequence[patches.JSONPatchItem]) -> Any:
        """
        Patch the object with JSON-patch operations (RFC 6902).

        The object is addressed by the builder's filters only: the name
        and the namespace are never taken from the operations.
        """
        if not operations:
            raise patches.EmptyOperationsError("No operations specified")
        return await self._execute(self.filters, executing.Operation.PATCH, list(operations))

    async def patch_status(self, obj: Mapping[str, Any]) -> Any:
        filters = self._targeted(obj)
        return await self._execute(filters, executing.Operation.PATCH_STATUS, dict(obj))

    async def apply(
            self,
            obj: Mapping[str, Any],
            options: Optional[executing.ApplyOptions] = None,
    ) -> Any:
        """
        Apply a partial object with the server-side apply.

        Only the fields present in the partial object are owned by this field
        manager. With ``force``, the fields owned by other managers are taken over;
        otherwise, the conflicts fail with :class:`APIConflictError` (HTTP 409).
        """
        filters = self._targeted(obj)
        force = options is not None and options.force
        operation = executing.Operation.FORCEAPPLY if force else executing.Operation.APPLY
        payload = self._with_kind(filters, obj)
        return await self._execute(filters, operation, payload, apply_options=options)

    async def logs(self, name: Optional[str] = None) -> Any:
        """
        Read the logs of a pod (as text).
        """
        filters = self._targeted(name)
        return await self._execute(filters, executing.Operation.GET, subresource='log')

    async def proxy(self, name: Optional[str] = None, *, port: Optional[int] = None) -> Any:
        """
        Send a GET request to a pod, a service, or a node via the API server's proxy.
        """
        filters = self._targeted(name)
        return await self._execute(filters, executing.Operation.GET,
                                   subresource='proxy', proxy_port=port)

    async def scale(self, name: Optional[str] = None, *, replicas: Optional[int] = None) -> Any:
        """
        Read the scale of a deployment, a replica set, or a stateful set.

        If ``replicas`` is given, the scale is changed to it (via a JSON-patch),
        and the updated scale is returned.
        """
        filters = self._targeted(name)
        if replicas is None:
            return await self._execute(filters, executing.Operation.GET, subresource='scale')
        ops = [{'op': 'replace', 'path': '/spec/replicas', 'value': replicas}]
        return await self._execute(filters, executing.Operation.PATCH, ops, subresource='scale')

    async def raw(self, path: str, method: str = 'GET') -> Any:
        return await self._execute(
            self.filters,
            executing.Operation.RAW,
            raw_path=path,
            raw_method=method.upper(),
        )

    def _with_kind(self, filters: filtering.Filters, obj: Mapping[str, Any]) -> Dict[str, Any]:
        payload = dict(obj)
        matched_kind = filters.kind_override or self._resolve_kind()
        if matched_kind is not None:
            payload.setdefault('apiVersion', matched_kind.api_version)
            payload.setdefault('kind', matched_kind.kind)
        return payload

    def _resolve_kind(self) -> Optional[kinds.ResourceKind]:
        registry = self.registry if self.registry is not None else kinds.get_default_registry()
        return registry.resolve(self.model)
