import json

import pytest
import yaml

from kubefluent._cogs.clients.errors import APIForbiddenError, APINotFoundError
from kubefluent._cogs.clients.executing import ApplyOptions, Operation
from kubefluent._cogs.structs.credentials import NoActiveCluster
from kubefluent._cogs.structs.filtering import Filters
from kubefluent._cogs.structs.kinds import ResourceKind
from kubefluent._core.builders import K8s
from kubefluent._core.loggers import LogFormat
from kubefluent.kind import ConfigMap, Deployment, Pod


@pytest.mark.parametrize('args', [['--help'], ['get', '--help'], ['apply', '--help'],
                                  ['delete', '--help'], ['raw', '--help']])
def test_help(invoke, args):
    result = invoke(args)
    assert result.exit_code == 0
    assert 'Usage:' in result.output


def test_main_help_lists_the_commands(invoke):
    result = invoke(['--help'])
    for command in ['get', 'apply', 'delete', 'raw']:
        assert command in result.output


def test_get_one_object(invoke, mocker):
    get = mocker.patch.object(K8s, 'get', autospec=True, return_value={'kind': 'Pod', 'x': 1})
    result = invoke(['get', 'Pod', 'pod1', '-n', 'ns1'])
    assert result.exit_code == 0, result.output
    assert yaml.safe_load(result.output) == {'kind': 'Pod', 'x': 1}
    assert get.call_count == 1
    builder, name = get.call_args.args
    assert builder.model is Pod
    assert builder.filters == Filters(namespace='ns1')
    assert name == 'pod1'


def test_get_with_selectors_as_json(invoke, mocker):
    get = mocker.patch.object(K8s, 'get', autospec=True, return_value={'kind': 'PodList'})
    result = invoke(['get', 'V1Pod', '-l', 'app=x', '-l', 'tier',
                     '--field', 'status.phase=Running', '-o', 'json'])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {'kind': 'PodList'}
    builder, name = get.call_args.args
    assert builder.filters == Filters(labels={'app': 'x', 'tier': ''},
                                      fields={'status.phase': 'Running'})
    assert name is None


def test_get_namespace_from_env(invoke, mocker):
    get = mocker.patch.object(K8s, 'get', autospec=True, return_value={})
    result = invoke(['get', 'Deployment'], env={'KUBEFLUENT_GET_NAMESPACE': 'ns-env'})
    assert result.exit_code == 0, result.output
    builder, _ = get.call_args.args
    assert builder.model is Deployment
    assert builder.filters.namespace == 'ns-env'


def test_get_unknown_kind_fails(invoke, mocker):
    get = mocker.patch.object(K8s, 'get', autospec=True)
    result = invoke(['get', 'Whatever'])
    assert result.exit_code == 2
    assert "Unknown kind: 'Whatever'" in result.output
    assert get.call_count == 0


def test_api_errors_are_reported(invoke, mocker):
    error = APIForbiddenError({'message': 'pods is forbidden'}, status=403, status_text='Forbidden')
    mocker.patch.object(K8s, 'get', autospec=True, side_effect=error)
    result = invoke(['get', 'Pod'])
    assert result.exit_code == 1
    assert '403 Forbidden: pods is forbidden' in result.output


def test_login_errors_are_reported(invoke, discover):
    discover.side_effect = NoActiveCluster("No currently active cluster.")
    result = invoke(['get', 'Pod'])
    assert result.exit_code == 1
    assert 'No currently active cluster.' in result.output


MANIFESTS = '''
apiVersion: v1
kind: ConfigMap
metadata:
  name: cm1
data:
  a: b
---
apiVersion: example.com/v1
kind: Gadget
metadata:
  name: g1
  namespace: ns2
spec: {}
'''


@pytest.mark.parametrize('args, force', [([], False), (['--force'], True)])
def test_apply_file(invoke, mocker, tmpdir, args, force):
    path = tmpdir.join('manifests.yaml')
    path.write(MANIFESTS)
    apply = mocker.patch.object(K8s, 'apply', autospec=True, side_effect=[{'r': 1}, {'r': 2}])
    result = invoke(['apply', '-f', str(path), '-n', 'ns1', '-o', 'json'] + args)
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{'r': 1}, {'r': 2}]
    assert apply.call_count == 2

    builder1, obj1, options1 = apply.call_args_list[0].args
    assert builder1.model == ConfigMap
    assert builder1.filters.namespace == 'ns1'
    assert obj1['metadata'] == {'name': 'cm1'}
    assert options1 == ApplyOptions(force=force)

    builder2, obj2, options2 = apply.call_args_list[1].args
    assert builder2.model == ResourceKind('example.com', 'v1', 'Gadget')
    assert builder2.filters.namespace is None
    assert obj2['metadata'] == {'name': 'g1', 'namespace': 'ns2'}
    assert options2 == ApplyOptions(force=force)


def test_apply_requires_an_existing_file(invoke):
    result = invoke(['apply', '-f', '/nonexistent/file.yaml'])
    assert result.exit_code == 2


@pytest.mark.parametrize('reply', [{'kind': 'Status'}, {}, None, ''],
                         ids=['status', 'empty-dict', 'empty-json', 'empty-text'])
def test_delete_reports_the_deletion_regardless_of_the_body(invoke, mocker, reply):
    execute = mocker.patch('kubefluent._cogs.clients.executing.execute', return_value=reply)
    result = invoke(['delete', 'Pod', 'pod1', '-n', 'ns1'])
    assert result.exit_code == 0, result.output
    assert 'Pod pod1 deleted.' in result.output
    model, filters, operation = execute.call_args.args
    assert model == Pod
    assert filters == Filters(name='pod1', namespace='ns1')
    assert operation == Operation.DELETE


def test_delete_reports_absent_objects(invoke, mocker):
    error = APINotFoundError({'kind': 'Status', 'code': 404}, status=404, status_text='Not Found')
    mocker.patch('kubefluent._cogs.clients.executing.execute', side_effect=error)
    result = invoke(['delete', 'Pod', 'pod1'])
    assert result.exit_code == 0, result.output
    assert 'Pod pod1 not found.' in result.output


def test_delete_escalates_other_failures(invoke, mocker):
    error = APIForbiddenError({'kind': 'Status', 'code': 403}, status=403, status_text='Forbidden')
    mocker.patch('kubefluent._cogs.clients.executing.execute', side_effect=error)
    result = invoke(['delete', 'Pod', 'pod1'])
    assert result.exit_code == 1
    assert '403 Forbidden' in result.output


def test_raw(invoke, mocker):
    raw = mocker.patch.object(K8s, 'raw', autospec=True, return_value={'major': '1'})
    result = invoke(['raw', '/version', '-o', 'json'])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {'major': '1'}
    _, path, method = raw.call_args.args
    assert path == '/version'
    assert method == 'GET'


def test_raw_text_is_printed_as_is(invoke, mocker):
    mocker.patch.object(K8s, 'raw', autospec=True, return_value='ok')
    result = invoke(['raw', '/healthz', '-X', 'get'])
    assert result.exit_code == 0, result.output
    assert result.output == 'ok\n'


@pytest.mark.parametrize('args, kwargs', [
    ([], dict(debug=False, verbose=False, quiet=False, log_format=LogFormat.PLAIN,
              log_prefix=None, log_refkey=None)),
    (['-v'], dict(debug=False, verbose=True, quiet=False, log_format=LogFormat.PLAIN,
                  log_prefix=None, log_refkey=None)),
    (['-d', '--log-format=json', '--log-refkey=k8s'],
     dict(debug=True, verbose=False, quiet=False, log_format=LogFormat.JSON,
          log_prefix=None, log_refkey='k8s')),
    (['-q', '--log-prefix'], dict(debug=False, verbose=False, quiet=True, log_format=LogFormat.PLAIN,
                                  log_prefix=True, log_refkey=None)),
])
def test_logging_options(invoke, mocker, configure, args, kwargs):
    mocker.patch.object(K8s, 'raw', autospec=True, return_value={})
    result = invoke(['raw', '/'] + args)
    assert result.exit_code == 0, result.output
    configure.assert_called_once_with(**kwargs)
