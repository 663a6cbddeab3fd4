"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubefluent import (
    kind,  # as a separate name on the public namespace
)
from kubefluent._cogs.clients.auth import (
    APIContext,
    use_context,
)
from kubefluent._cogs.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from kubefluent._cogs.clients.executing import (
    ApplyOptions,
    SubresourceNotSupported,
    Operation,
)
from kubefluent._cogs.clients.logins import (
    login_with_kubeconfig,
    login_with_service_account,
    wait_for_cluster,
)
from kubefluent._cogs.configs.configuration import (
    ClientSettings,
    NetworkingSettings,
    ApplySettings,
)
from kubefluent._cogs.helpers.envs import (
    from_env,
)
from kubefluent._cogs.helpers.typedefs import (
    Logger,
)
from kubefluent._cogs.helpers.versions import (
    version as __version__,
)
from kubefluent._cogs.structs.bodies import (
    RawBody,
    RawMeta,
    ManagedFieldEntry,
)
from kubefluent._cogs.structs.credentials import (
    LoginError,
    NoActiveCluster,
    ConnectionInfo,
)
from kubefluent._cogs.structs.filtering import (
    Filters,
    NamespaceAlreadySpecified,
    NameAlreadySpecified,
    NameNotSpecified,
)
from kubefluent._cogs.structs.finalizers import (
    FinalizerAction,
    update_finalizers_or_skip,
)
from kubefluent._cogs.structs.kinds import (
    ResourceKind,
    KindRegistry,
    KindNotSpecified,
    VersionNotSpecified,
    KindAlreadyRegistered,
    get_default_registry,
    register_kind,
    guess_kind,
)
from kubefluent._cogs.structs.patches import (
    JSONPatch,
    JSONPatchItem,
    EmptyOperationsError,
)
from kubefluent._cogs.structs.sanitizing import (
    remove_controller_fields,
)
from kubefluent._core.builders import (
    K8s,
)
from kubefluent._core.loggers import (
    LogFormat,
    configure,
)

__all__ = [
    'kind', 'K8s', 'Operation', 'ApplyOptions', 'SubresourceNotSupported',
    'APIContext', 'use_context',
    'APIError', 'APIUnauthorizedError', 'APIForbiddenError', 'APINotFoundError', 'APIConflictError',
    'login_with_kubeconfig', 'login_with_service_account', 'wait_for_cluster',
    'ClientSettings', 'NetworkingSettings', 'ApplySettings',
    'from_env', 'Logger', '__version__',
    'RawBody', 'RawMeta', 'ManagedFieldEntry',
    'LoginError', 'NoActiveCluster', 'ConnectionInfo',
    'Filters', 'NamespaceAlreadySpecified', 'NameAlreadySpecified', 'NameNotSpecified',
    'FinalizerAction', 'update_finalizers_or_skip',
    'ResourceKind', 'KindRegistry', 'KindNotSpecified', 'VersionNotSpecified',
    'KindAlreadyRegistered', 'get_default_registry', 'register_kind', 'guess_kind',
    'JSONPatch', 'JSONPatchItem', 'EmptyOperationsError',
    'remove_controller_fields',
    'LogFormat', 'configure',
]
