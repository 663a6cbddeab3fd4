import click.testing
import pytest

from kubefluent._cogs.structs.credentials import ConnectionInfo
from kubefluent.cli import main


@pytest.fixture()
def runner():
    return click.testing.CliRunner()


@pytest.fixture()
def invoke(runner):
    def _invoke(args, **kwargs):
        return runner.invoke(main, args, **kwargs)
    return _invoke


@pytest.fixture(autouse=True)
def configure(mocker):
    return mocker.patch('kubefluent._core.loggers.configure')


@pytest.fixture(autouse=True)
def discover(mocker):
    info = ConnectionInfo(server='https://fake-cluster')
    return mocker.patch('kubefluent._cogs.clients.logins.discover', return_value=info)
