import os

import pytest

TESTDATA = os.path.join(os.path.dirname(__file__), 'testdata')


def read_testdata(name):
    with open(os.path.join(TESTDATA, name), 'rb') as hnd:
        return hnd.read()


def strip_pem(pem):
    """Body of a PEM block without BEGIN/END lines"""
    return b''.join(line for line in pem.splitlines(keepends=True) if not line.startswith(b'-----'))


@pytest.fixture
def testdata():
    return read_testdata


@pytest.fixture
def testdata_path():
    def path(name):
        return os.path.join(TESTDATA, name)
    return path
