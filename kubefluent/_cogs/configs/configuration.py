"""
All configuration flags, options, settings to fine-tune the client.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

The settings are carried by the API context (see :class:`APIContext`),
so that different clusters or different parts of an application
can use different settings at the same time, without global state.
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A total timeout of one API request, including the connection and the body.
    If ``None``, the requests can last forever (on your own risk).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a connection to the API server.
    If ``None``, only the total request timeout applies.
    """


@dataclasses.dataclass
class ApplySettings:

    field_manager: str = 'kubefluent'
    """
    The name of the field manager for server-side apply requests.

    Kubernetes tracks the ownership of the applied fields per manager.
    Other managers' fields can only be overridden with a forced apply.
    """

    field_validation: str = 'Strict'
    """
    How the server validates unknown or duplicate fields in applied objects:
    ``Strict`` (fail the request), ``Warn``, or ``Ignore``.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    apply: ApplySettings = dataclasses.field(default_factory=ApplySettings)
