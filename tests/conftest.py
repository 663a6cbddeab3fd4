import dataclasses
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import aiohttp.web
import pytest
from aiohttp.test_utils import TestServer

from kubefluent._cogs.clients.auth import APIContext
from kubefluent._cogs.configs.configuration import ClientSettings
from kubefluent._cogs.structs.credentials import ConnectionInfo
from kubefluent._cogs.structs.kinds import ResourceKind


@dataclasses.dataclass
class FakeRequest:
    method: str
    path: str
    query: Dict[str, str]
    headers: Any
    data: Any


class FakeAPIServer:
    """
    A minimalistic fake of the Kubernetes API: it records all requests
    and replies with the pre-configured responses, the last one repeatedly.
    """

    def __init__(self) -> None:
        super().__init__()
        self.url: str = ''
        self.requests: List[FakeRequest] = []
        self._replies: List[Tuple[Any, int, Optional[str], str]] = []

    def __len__(self) -> int:
        return len(self.requests)

    def __getitem__(self, index: int) -> FakeRequest:
        return self.requests[index]

    def reply(
            self,
            data: Any = None,
            *,
            status: int = 200,
            text: Optional[str] = None,
            content_type: str = 'text/plain',
    ) -> None:
        self._replies.append((data if data is not None else {}, status, text, content_type))

    async def handle(self, request: aiohttp.web.Request) -> aiohttp.web.Response:
        body = await request.read()
        self.requests.append(FakeRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=request.headers.copy(),
            data=json.loads(body) if body else None,
        ))
        if len(self._replies) > 1:
            data, status, text, content_type = self._replies.pop(0)
        elif self._replies:
            data, status, text, content_type = self._replies[0]
        else:
            data, status, text, content_type = {}, 200, None, 'text/plain'
        if text is not None:
            return aiohttp.web.Response(text=text, status=status, content_type=content_type)
        return aiohttp.web.json_response(data, status=status)


@pytest.fixture()
async def kube():
    fake = FakeAPIServer()
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.url = f'http://{server.host}:{server.port}'
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture()
def settings():
    return ClientSettings()


@pytest.fixture()
async def context(kube, settings):
    info = ConnectionInfo(server=kube.url, default_namespace='default-ns')
    async with APIContext(info, settings=settings) as context:
        yield context


@pytest.fixture()
def logger():
    return logging.getLogger('kubefluent.tests')


@pytest.fixture()
def crd():
    return ResourceKind('example.com', 'v1', 'WebApp', 'webapps')
