import logging

from conftest import read_testdata
from ktool.log import SensitiveDataFilter


def make_record(msg, args=()):
    return logging.LogRecord('ktool', logging.INFO, __file__, 1, msg, args, None)


def test_private_key_in_message_is_redacted():
    record = make_record('got ' + read_testdata('pkcs8.pem').decode('ascii'))
    SensitiveDataFilter().filter(record)
    assert record.getMessage() == 'got [PRIVATE KEY REDACTED]\n'


def test_private_key_in_args_is_redacted():
    record = make_record('got %s', (read_testdata('pkcs1.pem').decode('ascii'),))
    SensitiveDataFilter().filter(record)
    assert 'MII' not in record.getMessage()


def test_json_key_field_is_redacted():
    record = make_record('{"key": "MIIEvQ", "target": "pkcs1"}')
    SensitiveDataFilter().filter(record)
    assert record.getMessage() == '{"key": "[REDACTED]", "target": "pkcs1"}'


def test_public_key_is_kept():
    pem = read_testdata('public_key.pem').decode('ascii')
    record = make_record(pem)
    SensitiveDataFilter().filter(record)
    assert record.getMessage() == pem
