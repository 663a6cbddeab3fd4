"""
The built-in kinds of Kubernetes, for use as ``K8s(kind.Pod)``.

Custom resources are declared as :class:`kubefluent.ResourceKind` directly.
"""
# isort: skip_file
from kubefluent._cogs.structs.kinds import (
    CoreEvent,
    Event,
    APIService,
    CertificateSigningRequest,
    ClusterRole,
    ClusterRoleBinding,
    ConfigMap,
    ControllerRevision,
    CronJob,
    CSIDriver,
    CustomResourceDefinition,
    DaemonSet,
    Deployment,
    EndpointSlice,
    Endpoints,
    HorizontalPodAutoscaler,
    Ingress,
    IngressClass,
    Job,
    LimitRange,
    LocalSubjectAccessReview,
    MutatingWebhookConfiguration,
    Namespace,
    NetworkPolicy,
    Node,
    PersistentVolume,
    PersistentVolumeClaim,
    Pod,
    PodDisruptionBudget,
    PodTemplate,
    ReplicaSet,
    ReplicationController,
    ResourceQuota,
    Role,
    RoleBinding,
    RuntimeClass,
    Secret,
    SelfSubjectAccessReview,
    SelfSubjectRulesReview,
    Service,
    ServiceAccount,
    StatefulSet,
    StorageClass,
    SubjectAccessReview,
    TokenReview,
    ValidatingWebhookConfiguration,
    VolumeAttachment,
)

__all__ = [
    'CoreEvent', 'Event', 'APIService', 'CertificateSigningRequest', 'ClusterRole',
    'ClusterRoleBinding', 'ConfigMap', 'ControllerRevision', 'CronJob', 'CSIDriver',
    'CustomResourceDefinition', 'DaemonSet', 'Deployment', 'EndpointSlice', 'Endpoints',
    'HorizontalPodAutoscaler', 'Ingress', 'IngressClass', 'Job', 'LimitRange',
    'LocalSubjectAccessReview', 'MutatingWebhookConfiguration', 'Namespace', 'NetworkPolicy',
    'Node', 'PersistentVolume', 'PersistentVolumeClaim', 'Pod', 'PodDisruptionBudget',
    'PodTemplate', 'ReplicaSet', 'ReplicationController', 'ResourceQuota', 'Role',
    'RoleBinding', 'RuntimeClass', 'Secret', 'SelfSubjectAccessReview', 'SelfSubjectRulesReview',
    'Service', 'ServiceAccount', 'StatefulSet', 'StorageClass', 'SubjectAccessReview',
    'TokenReview', 'ValidatingWebhookConfiguration', 'VolumeAttachment',
]
