import base64
import binascii
import re
from collections import namedtuple

from ktool.errors import DecodeError

PEM_MARKER = b'-----BEGIN'
LINE_WIDTH = 64

PEM_BLOCK_RE = re.compile(
    rb'-----BEGIN ([^-\r\n]*)-----\r?\n(.*?)-----END \1-----',
    re.DOTALL
)

PemBlock = namedtuple('PemBlock', ['label', 'der'])


def to_bytes(data):
    if isinstance(data, str):
        return data.encode('utf-8')
    return bytes(data)


def is_pem(data):
    """True if the input already starts with a PEM BEGIN marker"""
    return to_bytes(data).startswith(PEM_MARKER)


def b64decode_strict(text):
    """Decode base64 text, ignoring line breaks but rejecting anything else outside the alphabet"""
    text_clean = b''.join(to_bytes(text).split())
    if not text_clean:
        raise DecodeError('input is empty')
    try:
        return base64.b64decode(text_clean, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f'illegal base64 data: {e}') from e


def decode_pem(data):
    """Find the first PEM block in the input and return its label and decoded payload"""
    match = PEM_BLOCK_RE.search(to_bytes(data))
    if match is None:
        raise DecodeError('failed to decode PEM block containing key')
    label = match.group(1).decode('ascii', errors='replace')
    try:
        der = b64decode_strict(match.group(2))
    except DecodeError as e:
        raise DecodeError(f'failed to decode {label} PEM block: {e}') from e
    return PemBlock(label, der)


def extract_der(data):
    """
    Normalize a PEM block or bare base64 text into DER bytes.

    Input starting with "-----BEGIN" is parsed as PEM, anything else is
    decoded as base64.
    """
    data = to_bytes(data)
    if data.startswith(PEM_MARKER):
        return decode_pem(data).der
    return b64decode_strict(data)


def wrap_lines(text, width=LINE_WIDTH):
    """
    Split text into lines of `width` code points, each terminated with a newline.

    The last partial line is terminated the same way. Empty text gives an
    empty string.
    """
    return ''.join(text[i:i + width] + '\n' for i in range(0, len(text), width))


def armor(label, body):
    """Wrap an unbroken base64 body between BEGIN/END lines for the label"""
    return (
        f'-----BEGIN {label}-----\n'
        + wrap_lines(body)
        + f'-----END {label}-----\n'
    ).encode('utf-8')
