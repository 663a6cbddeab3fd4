import base64
import contextlib
import dataclasses
import functools
import ssl
import tempfile
from contextvars import ContextVar
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union, cast

import aiohttp

from kubefluent._cogs.clients import logins
from kubefluent._cogs.configs import configuration
from kubefluent._cogs.helpers import versions
from kubefluent._cogs.structs import credentials

# An ambient context for the current task and its sub-tasks (if set via `use_context`).
# Used by the client wrappers when no context is passed explicitly.
context_var: ContextVar["APIContext"] = ContextVar('context_var')

# A typevar to show that we return a function with the same signature as given.
_F = TypeVar('_F', bound=Callable[..., Any])


def authenticated(fn: _F) -> _F:
    """
    A decorator to inject an authenticated context to a requesting routine.

    The context is taken from (in this order of precedence): the explicitly
    passed ``context=`` kwarg; the ambient context of the current task
    (see :func:`use_context`); a new one-shot context from the discovered
    credentials, which is closed once the routine is finished.
    """
    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:

        # If a context is explicitly passed, make it a simple call.
        context: Optional[APIContext] = kwargs.pop('context', None)
        if context is not None:
            return await fn(*args, **kwargs, context=context)

        context = context_var.get(None)
        if context is not None:
            return await fn(*args, **kwargs, context=context)

        # Otherwise, login from scratch. The session lives only for the duration of the call.
        info = logins.discover()
        async with APIContext(info) as context:
            return await fn(*args, **kwargs, context=context)

    return cast(_F, wrapper)


@contextlib.contextmanager
def use_context(context: "APIContext") -> Iterator["APIContext"]:
    """
    Make the context ambient for all requests in the current task.

    Usage::

        async with kubefluent.APIContext(info) as context:
            with kubefluent.use_context(context):
                await kubefluent.K8s(kubefluent.kind.Pod).get()
    """
    token = context_var.set(context)
    try:
        yield context
    finally:
        context_var.reset(token)


@dataclasses.dataclass
class RequestOptions:
    """
    Per-request options: mutable, so that the operations can adjust them.
    """
    method: str
    headers: Dict[str, str]


class APIContext:
    """
    A container for an aiohttp session and the environment info.

    The context is owned by the caller: it must be closed when not needed,
    preferably by using it as an async context manager.
    """

    # The main contained object used by the API methods.
    session: aiohttp.ClientSession

    # Contextual information for URL building.
    server: str
    default_namespace: Optional[str]

    settings: configuration.ClientSettings
    user_agent: str

    def __init__(
            self,
            info: credentials.ConnectionInfo,
            *,
            settings: Optional[configuration.ClientSettings] = None,
    ) -> None:
        super().__init__()
        self.session = self.make_aiohttp_session(info)
        self.server = info.server
        self.default_namespace = info.default_namespace
        self.settings = settings if settings is not None else configuration.ClientSettings()
        self.user_agent = f'kubefluent/{versions.version or "unknown"}'

    async def __aenter__(self) -> "APIContext":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.session.close()

    def prepare(self, method: str) -> RequestOptions:
        """
        Prepare the default options for one request with the given HTTP method.
        """
        return RequestOptions(
            method=method,
            headers={
                'Content-Type': 'application/json',
                'User-Agent': self.user_agent,
            },
        )

    def make_aiohttp_session(self, info: credentials.ConnectionInfo) -> aiohttp.ClientSession:

        # Some SSL data are not accepted directly, so we have to use temp files.
        # Do not even create temporary files if there is no need. It can be a readonly filesystem.
        with contextlib.ExitStack() as stack:

            cert_path: Optional[str]
            if info.certificate_path:
                cert_path = info.certificate_path
            elif info.certificate_data:
                cert_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                cert_file.write(decode_to_pem(info.certificate_data).encode('ascii'))
                cert_path = cert_file.name
            else:
                cert_path = None

            pkey_path: Optional[str]
            if info.private_key_path:
                pkey_path = info.private_key_path
            elif info.private_key_data:
                pkey_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                pkey_file.write(decode_to_pem(info.private_key_data).encode('ascii'))
                pkey_path = pkey_file.name
            else:
                pkey_path = None

            # The SSL part (both client certificate auth and CA verification).
            context = ssl.create_default_context(
                purpose=ssl.Purpose.SERVER_AUTH,
                cafile=info.ca_path,
                cadata=decode_to_pem(info.ca_data) if info.ca_data is not None else None,
            )
            if cert_path and pkey_path:
                context.load_cert_chain(certfile=cert_path, keyfile=pkey_path)

        if info.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        # The token auth part.
        headers: Dict[str, str] = {}
        if info.scheme and info.token:
            headers['Authorization'] = f'{info.scheme} {info.token}'
        elif info.scheme:
            headers['Authorization'] = f'{info.scheme}'
        elif info.token:
            headers['Authorization'] = f'Bearer {info.token}'

        # The basic auth part.
        auth: Optional[aiohttp.BasicAuth]
        if info.username and info.password:
            auth = aiohttp.BasicAuth(info.username, info.password)
        else:
            auth = None

        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=0,
                ssl=context,
            ),
            headers=headers,
            auth=auth,
        )


def decode_to_pem(data: Union[str, bytes]) -> str:
    if isinstance(data, str) and data.startswith('-----BEGIN '):
        return data
    elif isinstance(data, bytes) and data.startswith(b'-----BEGIN '):
        return data.decode('ascii')
    else:
        return base64.b64decode(data).decode('ascii')
