"""
Resource kinds and their registry.

A kind is an identity of a resource type: the API group, the version,
the kind's name, and the plural name used in the URLs. The registry maps
the names of the models (e.g. ``"Pod"`` or ``"V1Pod"``) to the kinds,
so that the builders can be constructed from the models or names alone.

Custom resources must be registered explicitly (see :func:`register_kind`),
or passed as :class:`ResourceKind` directly, or overridden via the filters.
"""
import dataclasses
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union


class KindNotSpecified(ValueError):
    """ Raised when a model cannot be resolved to a resource kind. """


class VersionNotSpecified(ValueError):
    """ Raised when a non-core kind has a group but no version. """


class KindAlreadyRegistered(ValueError):
    """ Raised when a model name is registered twice. """


@dataclasses.dataclass(frozen=True)
class ResourceKind:
    group: str
    version: str
    kind: str
    plural: Optional[str] = None

    @property
    def api_version(self) -> str:
        # Strip heading/trailing slashes if group is absent (e.g. for pods).
        return f'{self.group}/{self.version}'.strip('/')

    @property
    def resource_plural(self) -> str:
        return self.plural or f'{self.kind.lower()}s'

    def __str__(self) -> str:
        return f'{self.kind}.{self.api_version}'


# Anything that can be resolved to a kind: the kind itself, a model name, or a model class.
Model = Union[ResourceKind, str, type]


def model_name(model: Model) -> str:
    if isinstance(model, ResourceKind):
        return model.kind
    elif isinstance(model, str):
        return model
    elif isinstance(model, type):
        return model.__name__
    else:
        raise TypeError(f"Unsupported model type: {model!r}")


class KindRegistry:
    """
    A mapping of model names to the resource kinds.

    The names are case-sensitive and are usually the class names of the models.
    """

    def __init__(self, kinds: Optional[Mapping[str, ResourceKind]] = None) -> None:
        super().__init__()
        self._kinds: Dict[str, ResourceKind] = dict(kinds or {})

    def __contains__(self, model: Model) -> bool:
        return model_name(model) in self._kinds

    def register(self, model: Model, kind: ResourceKind) -> None:
        name = model_name(model)
        if name in self._kinds:
            raise KindAlreadyRegistered(f"Kind {name} is already registered as {self._kinds[name]}")
        self._kinds[name] = kind

    def resolve(self, model: Model) -> Optional[ResourceKind]:
        if isinstance(model, ResourceKind):
            return model
        return self._kinds.get(model_name(model))

    def guess(self, api_version: str, kind: str) -> ResourceKind:
        """
        Resolve a kind as seen in a manifest (``apiVersion`` & ``kind`` fields).

        The registered kinds are preferred, as they know the irregular plurals.
        Unknown kinds get the default plural, which is good for most CRDs.
        """
        registered = self._kinds.get(kind)
        if registered is not None and registered.api_version == api_version:
            return registered
        for candidate in self._kinds.values():
            if candidate.kind == kind and candidate.api_version == api_version:
                return candidate
        group, _, version = api_version.rpartition('/')
        return ResourceKind(group=group, version=version, kind=kind)


# The built-in kinds of Kubernetes, as exposed for `K8s(kind.Pod)` and similar.
CoreEvent = ResourceKind('', 'v1', 'Event', 'events')
Event = ResourceKind('events.k8s.io', 'v1', 'Event', 'events')
APIService = ResourceKind('apiregistration.k8s.io', 'v1', 'APIService', 'apiservices')
CertificateSigningRequest = ResourceKind('certificates.k8s.io', 'v1', 'CertificateSigningRequest', 'certificatesigningrequests')
ClusterRole = ResourceKind('rbac.authorization.k8s.io', 'v1', 'ClusterRole', 'clusterroles')
ClusterRoleBinding = ResourceKind('rbac.authorization.k8s.io', 'v1', 'ClusterRoleBinding', 'clusterrolebindings')
ConfigMap = ResourceKind('', 'v1', 'ConfigMap', 'configmaps')
ControllerRevision = ResourceKind('apps', 'v1', 'ControllerRevision', 'controllerrevisions')
CronJob = ResourceKind('batch', 'v1', 'CronJob', 'cronjobs')
CSIDriver = ResourceKind('storage.k8s.io', 'v1', 'CSIDriver', 'csidrivers')
CustomResourceDefinition = ResourceKind('apiextensions.k8s.io', 'v1', 'CustomResourceDefinition', 'customresourcedefinitions')
DaemonSet = ResourceKind('apps', 'v1', 'DaemonSet', 'daemonsets')
Deployment = ResourceKind('apps', 'v1', 'Deployment', 'deployments')
EndpointSlice = ResourceKind('discovery.k8s.io', 'v1', 'EndpointSlice', 'endpointslices')
Endpoints = ResourceKind('', 'v1', 'Endpoints', 'endpoints')
HorizontalPodAutoscaler = ResourceKind('autoscaling', 'v2', 'HorizontalPodAutoscaler', 'horizontalpodautoscalers')
Ingress = ResourceKind('networking.k8s.io', 'v1', 'Ingress', 'ingresses')
IngressClass = ResourceKind('networking.k8s.io', 'v1', 'IngressClass', 'ingressclasses')
Job = ResourceKind('batch', 'v1', 'Job', 'jobs')
LimitRange = ResourceKind('', 'v1', 'LimitRange', 'limitranges')
LocalSubjectAccessReview = ResourceKind('authorization.k8s.io', 'v1', 'LocalSubjectAccessReview', 'localsubjectaccessreviews')
MutatingWebhookConfiguration = ResourceKind('admissionregistration.k8s.io', 'v1', 'MutatingWebhookConfiguration', 'mutatingwebhookconfigurations')
Namespace = ResourceKind('', 'v1', 'Namespace', 'namespaces')
NetworkPolicy = ResourceKind('networking.k8s.io', 'v1', 'NetworkPolicy', 'networkpolicies')
Node = ResourceKind('', 'v1', 'Node', 'nodes')
PersistentVolume = ResourceKind('', 'v1', 'PersistentVolume', 'persistentvolumes')
PersistentVolumeClaim = ResourceKind('', 'v1', 'PersistentVolumeClaim', 'persistentvolumeclaims')
Pod = ResourceKind('', 'v1', 'Pod', 'pods')
PodDisruptionBudget = ResourceKind('policy', 'v1', 'PodDisruptionBudget', 'poddisruptionbudgets')
PodTemplate = ResourceKind('', 'v1', 'PodTemplate', 'podtemplates')
ReplicaSet = ResourceKind('apps', 'v1', 'ReplicaSet', 'replicasets')
ReplicationController = ResourceKind('', 'v1', 'ReplicationController', 'replicationcontrollers')
ResourceQuota = ResourceKind('', 'v1', 'ResourceQuota', 'resourcequotas')
Role = ResourceKind('rbac.authorization.k8s.io', 'v1', 'Role', 'roles')
RoleBinding = ResourceKind('rbac.authorization.k8s.io', 'v1', 'RoleBinding', 'rolebindings')
RuntimeClass = ResourceKind('node.k8s.io', 'v1', 'RuntimeClass', 'runtimeclasses')
Secret = ResourceKind('', 'v1', 'Secret', 'secrets')
SelfSubjectAccessReview = ResourceKind('authorization.k8s.io', 'v1', 'SelfSubjectAccessReview', 'selfsubjectaccessreviews')
SelfSubjectRulesReview = ResourceKind('authorization.k8s.io', 'v1', 'SelfSubjectRulesReview', 'selfsubjectrulesreviews')
Service = ResourceKind('', 'v1', 'Service', 'services')
ServiceAccount = ResourceKind('', 'v1', 'ServiceAccount', 'serviceaccounts')
StatefulSet = ResourceKind('apps', 'v1', 'StatefulSet', 'statefulsets')
StorageClass = ResourceKind('storage.k8s.io', 'v1', 'StorageClass', 'storageclasses')
SubjectAccessReview = ResourceKind('authorization.k8s.io', 'v1', 'SubjectAccessReview', 'subjectaccessreviews')
TokenReview = ResourceKind('authentication.k8s.io', 'v1', 'TokenReview', 'tokenreviews')
ValidatingWebhookConfiguration = ResourceKind('admissionregistration.k8s.io', 'v1', 'ValidatingWebhookConfiguration', 'validatingwebhookconfigurations')
VolumeAttachment = ResourceKind('storage.k8s.io', 'v1', 'VolumeAttachment', 'volumeattachments')

# Models are usually named as the upstream client libraries name them: `V1Pod`, `CoreV1Event`.
BUILTIN_KINDS: Mapping[str, ResourceKind] = {
    'CoreV1Event': CoreEvent,
    'CoreEvent': CoreEvent,
    'EventsV1Event': Event,
    'Event': Event,
    **{f'V1{kind.kind}': kind for kind in [
        APIService, CertificateSigningRequest, ClusterRole, ClusterRoleBinding, ConfigMap,
        ControllerRevision, CronJob, CSIDriver, CustomResourceDefinition, DaemonSet, Deployment,
        EndpointSlice, Endpoints, Ingress, IngressClass, Job, LimitRange, LocalSubjectAccessReview,
        MutatingWebhookConfiguration, Namespace, NetworkPolicy, Node, PersistentVolume,
        PersistentVolumeClaim, Pod, PodDisruptionBudget, PodTemplate, ReplicaSet,
        ReplicationController, ResourceQuota, Role, RoleBinding, RuntimeClass, Secret,
        SelfSubjectAccessReview, SelfSubjectRulesReview, Service, ServiceAccount, StatefulSet,
        StorageClass, SubjectAccessReview, TokenReview, ValidatingWebhookConfiguration,
        VolumeAttachment,
    ]},
    'V2HorizontalPodAutoscaler': HorizontalPodAutoscaler,
}


def _with_short_names(kinds: Mapping[str, ResourceKind]) -> Iterator[Tuple[str, ResourceKind]]:
    for name, kind in kinds.items():
        yield name, kind
        if kind.kind not in kinds:
            yield kind.kind, kind


_default_registry: KindRegistry = KindRegistry(dict(_with_short_names(BUILTIN_KINDS)))


def get_default_registry() -> KindRegistry:
    return _default_registry


def register_kind(model: Model, kind: ResourceKind) -> None:
    """
    Register a custom kind for a model in the default registry.

    Usage::

        class WebApp:
            ...

        kubefluent.register_kind(WebApp, kubefluent.ResourceKind('example.com', 'v1', 'WebApp'))
        await kubefluent.K8s(WebApp).in_namespace('default').get()
    """
    _default_registry.register(model, kind)


def guess_kind(api_version: str, kind: str) -> ResourceKind:
    return _default_registry.guess(api_version, kind)
