"""
Rudimentary logins: discovery of the cluster and its credentials.

The library is not a full-featured client, and avoids bringing too much logic
for proper authentication, especially all the complex auth-providers.
Only the static credentials are supported: either from the service account
when running in a cluster, or from the kubeconfig files otherwise.

.. seealso::
    :mod:`kubefluent._cogs.structs.credentials`.
"""
import asyncio
import os
from typing import Any, Dict, Optional

import yaml

from kubefluent._cogs.structs import credentials

# As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
SERVICE_ACCOUNT_TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
SERVICE_ACCOUNT_NAMESPACE_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'
SERVICE_ACCOUNT_CA_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'


def has_service_account() -> bool:
    return os.path.exists(SERVICE_ACCOUNT_TOKEN_PATH)


def login_with_service_account() -> Optional[credentials.ConnectionInfo]:
    """
    A minimalistic login that can get raw data from a service account.

    No parsing or sophisticated multi-step token retrieval is performed.
    """
    if os.path.exists(SERVICE_ACCOUNT_TOKEN_PATH):
        with open(SERVICE_ACCOUNT_TOKEN_PATH, encoding='utf-8') as f:
            token = f.read().strip()

        namespace: Optional[str] = None
        if os.path.exists(SERVICE_ACCOUNT_NAMESPACE_PATH):
            with open(SERVICE_ACCOUNT_NAMESPACE_PATH, encoding='utf-8') as f:
                namespace = f.read().strip()

        # The service's env vars are injected into every pod; the DNS name works almost always.
        host = os.environ.get('KUBERNETES_SERVICE_HOST')
        port = os.environ.get('KUBERNETES_SERVICE_PORT', '443')
        server = f'https://{host}:{port}' if host else 'https://kubernetes.default.svc'

        return credentials.ConnectionInfo(
            server=server,
            ca_path=SERVICE_ACCOUNT_CA_PATH if os.path.exists(SERVICE_ACCOUNT_CA_PATH) else None,
            token=token or None,
            default_namespace=namespace or None,
        )
    else:
        return None


def has_kubeconfig() -> bool:
    env_var_set = bool(os.environ.get('KUBECONFIG'))
    file_exists = os.path.exists(os.path.expanduser('~/.kube/config'))
    return env_var_set or file_exists


def login_with_kubeconfig() -> Optional[credentials.ConnectionInfo]:
    """
    A minimalistic login that can get raw data from the kubeconfig files.

    Only the current context is used. The auth-providers and exec-plugins
    are not executed: only their cached access tokens (if any) are used.
    """

    # As per https://kubernetes.io/docs/concepts/configuration/organize-cluster-access-kubeconfig/
    kubeconfig = os.environ.get('KUBECONFIG')
    if not kubeconfig and os.path.exists(os.path.expanduser('~/.kube/config')):
        kubeconfig = '~/.kube/config'
    if not kubeconfig:
        return None

    paths = [path.strip() for path in kubeconfig.split(os.pathsep)]
    paths = [os.path.expanduser(path) for path in paths if path]

    # As prescribed: if the file is absent or non-deserialisable, then fail. The first value wins.
    current_context: Optional[str] = None
    contexts: Dict[Any, Any] = {}
    clusters: Dict[Any, Any] = {}
    users: Dict[Any, Any] = {}
    for path in paths:

        with open(path, encoding='utf-8') as f:
            config = yaml.safe_load(f.read()) or {}

        if current_context is None:
            current_context = config.get('current-context')
        for item in config.get('contexts') or []:
            if item['name'] not in contexts:
                contexts[item['name']] = item.get('context') or {}
        for item in config.get('clusters') or []:
            if item['name'] not in clusters:
                clusters[item['name']] = item.get('cluster') or {}
        for item in config.get('users') or []:
            if item['name'] not in users:
                users[item['name']] = item.get('user') or {}

    # Once fully parsed, use the current context only.
    if current_context is None:
        raise credentials.LoginError('Current context is not set in kubeconfigs.')
    if current_context not in contexts:
        raise credentials.LoginError(f'Current context {current_context!r} is not defined.')
    context = contexts[current_context]
    cluster = clusters.get(context.get('cluster'), {})
    user = users.get(context.get('user'), {})

    # A context without a cluster (or a cluster without a server) cannot be connected to.
    if not cluster.get('server'):
        return None

    provider_token = user.get('auth-provider', {}).get('config', {}).get('access-token')

    # Map the retrieved fields into the credentials object.
    return credentials.ConnectionInfo(
        server=cluster.get('server'),
        ca_path=cluster.get('certificate-authority'),
        ca_data=cluster.get('certificate-authority-data'),
        insecure=cluster.get('insecure-skip-tls-verify'),
        certificate_path=user.get('client-certificate'),
        certificate_data=user.get('client-certificate-data'),
        private_key_path=user.get('client-key'),
        private_key_data=user.get('client-key-data'),
        username=user.get('username'),
        password=user.get('password'),
        token=user.get('token') or provider_token,
        default_namespace=context.get('namespace'),
    )


def discover() -> credentials.ConnectionInfo:
    """
    Find the currently active cluster: in-cluster first, then via kubeconfig.
    """
    info: Optional[credentials.ConnectionInfo] = None
    if has_service_account():
        info = login_with_service_account()
    if info is None and has_kubeconfig():
        info = login_with_kubeconfig()
    if info is None:
        raise credentials.NoActiveCluster("No currently active cluster.")
    return info


async def wait_for_cluster(seconds: float = 30) -> credentials.ConnectionInfo:
    """
    Wait until a cluster is configured, e.g. when the kubeconfig is being created.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + seconds
    while True:
        try:
            return discover()
        except credentials.NoActiveCluster:
            if loop.time() >= deadline:
                raise
            await asyncio.sleep(1)
