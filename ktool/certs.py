import logging

from cryptography import x509
from cryptography.hazmat.backends import default_backend

from ktool.errors import DecodeError
from ktool.pem import decode_pem

logger = logging.getLogger(__name__)


def parse_certificate(data):
    """Parse the first PEM block of the input as an X.509 certificate"""
    try:
        block = decode_pem(data)
    except DecodeError as e:
        raise DecodeError(f'certificate failed to load: {e}') from e

    try:
        cert = x509.load_der_x509_certificate(block.der, default_backend())
    except ValueError as e:
        raise DecodeError(f'failed to parse {block.label} block as certificate: {e}') from e

    logger.debug('Loaded certificate with serial %d', cert.serial_number)
    return cert


def serial_number_hex(cert):
    """
    Serial number as uppercase hex of its minimal big-endian bytes.

    Same output as `openssl x509 -noout -serial`, without the prefix.
    """
    serial = abs(cert.serial_number)
    return serial.to_bytes((serial.bit_length() + 7) // 8, 'big').hex().upper()
