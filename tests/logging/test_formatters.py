import json
import logging.handlers

import pytest

from kubefluent._core.loggers import LogFormat, ObjectJsonFormatter, ObjectPrefixingJsonFormatter, \
                                     ObjectPrefixingTextFormatter, ObjectTextFormatter, \
                                     make_formatter

NS_REF = {'apiVersion': 'v1', 'kind': 'Pod', 'name': 'name1', 'namespace': 'namespace1'}
CLUSTER_REF = {'apiVersion': 'v1', 'kind': 'Namespace', 'name': 'name1', 'namespace': None}


def make_record(**extra):
    logger = logging.getLogger('kubefluent.tests.formatters')
    return logger.makeRecord(logger.name, logging.INFO, __file__, 0, "hello", (), None, extra=extra)


def test_text_formatter_has_no_prefix():
    formatter = ObjectTextFormatter('%(message)s')
    assert formatter.format(make_record(k8s_ref=NS_REF)) == "hello"


def test_prefixing_text_formatter_for_namespaced_objects():
    formatter = ObjectPrefixingTextFormatter('%(message)s')
    assert formatter.format(make_record(k8s_ref=NS_REF)) == "[namespace1/name1] hello"


def test_prefixing_text_formatter_for_cluster_objects():
    formatter = ObjectPrefixingTextFormatter('%(message)s')
    assert formatter.format(make_record(k8s_ref=CLUSTER_REF)) == "[name1] hello"


def test_prefixing_text_formatter_for_lists():
    formatter = ObjectPrefixingTextFormatter('%(message)s')
    ref = dict(NS_REF, name=None, namespace=None)
    assert formatter.format(make_record(k8s_ref=ref)) == "hello"


def test_prefixing_text_formatter_without_refs():
    formatter = ObjectPrefixingTextFormatter('%(message)s')
    assert formatter.format(make_record()) == "hello"


def test_prefixing_does_not_change_the_original_record():
    formatter = ObjectPrefixingTextFormatter('%(message)s')
    record = make_record(k8s_ref=NS_REF)
    formatter.format(record)
    assert record.msg == "hello"


def test_json_formatter_puts_the_ref_aside():
    formatter = ObjectJsonFormatter()
    data = json.loads(formatter.format(make_record(k8s_ref=NS_REF)))
    assert data['message'] == 'hello'
    assert data['severity'] == 'info'
    assert data['object'] == NS_REF
    assert 'k8s_ref' not in data
    assert 'timestamp' in data


def test_json_formatter_drops_absent_ref_fields():
    formatter = ObjectJsonFormatter(refkey='k8s')
    data = json.loads(formatter.format(make_record(k8s_ref=CLUSTER_REF)))
    assert data['k8s'] == {'apiVersion': 'v1', 'kind': 'Namespace', 'name': 'name1'}


def test_prefixing_json_formatter():
    formatter = ObjectPrefixingJsonFormatter()
    data = json.loads(formatter.format(make_record(k8s_ref=NS_REF)))
    assert data['message'] == '[namespace1/name1] hello'


@pytest.mark.parametrize('log_format, log_prefix, cls', [
    (LogFormat.PLAIN, False, ObjectTextFormatter),
    (LogFormat.PLAIN, True, ObjectPrefixingTextFormatter),
    (LogFormat.PLAIN, None, ObjectPrefixingTextFormatter),
    (LogFormat.FULL, None, ObjectPrefixingTextFormatter),
    (LogFormat.JSON, False, ObjectJsonFormatter),
    (LogFormat.JSON, True, ObjectPrefixingJsonFormatter),
    (LogFormat.JSON, None, ObjectJsonFormatter),
    ('%(message)s', False, ObjectTextFormatter),
    ('%(message)s', True, ObjectPrefixingTextFormatter),
])
def test_formatter_selection(log_format, log_prefix, cls):
    formatter = make_formatter(log_format=log_format, log_prefix=log_prefix)
    assert type(formatter) is cls


def test_unsupported_formats_fail():
    with pytest.raises(ValueError):
        make_formatter(log_format=123)  # type: ignore
