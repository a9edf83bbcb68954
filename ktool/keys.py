"""RSA key format detection, PEM formatting and PKCS#1 <-> PKCS#8 conversion.

The DER loaders in cryptography accept either container for the same key,
so the container itself is recognized by decoding against the ASN.1 types
from pyasn1-modules. The key material is then validated with cryptography.
"""
import enum
import logging

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import decoder
from pyasn1.error import PyAsn1Error
from pyasn1_modules import rfc2437, rfc2459, rfc5208

from ktool.errors import ConversionError, DecodeError, UnknownFormatError
from ktool.pem import armor, extract_der, is_pem, to_bytes

logger = logging.getLogger(__name__)

LOAD_ERRORS = (PyAsn1Error, ValueError, TypeError, UnsupportedAlgorithm)


class KeyFormat(enum.Enum):
    PKCS1 = 'PKCS1'
    PKCS8 = 'PKCS8'
    UNKNOWN = 'unknown'

    def __str__(self):
        return self.value


class KeyKind(enum.Enum):
    PUBLIC = 'public'
    PRIVATE = 'private'

    def __str__(self):
        return self.value


# PEM labels by (kind, format)
PEM_LABELS = {
    (KeyKind.PUBLIC, KeyFormat.PKCS1): 'RSA PUBLIC KEY',
    (KeyKind.PUBLIC, KeyFormat.PKCS8): 'PUBLIC KEY',
    (KeyKind.PRIVATE, KeyFormat.PKCS1): 'RSA PRIVATE KEY',
    (KeyKind.PRIVATE, KeyFormat.PKCS8): 'PRIVATE KEY',
}


def decode_exact(der, asn1_spec):
    """Decode DER against an ASN.1 type, rejecting trailing data"""
    value, rest = decoder.decode(der, asn1Spec=asn1_spec)
    if rest:
        raise PyAsn1Error(f'{len(rest)} bytes of trailing data after {asn1_spec.__class__.__name__}')
    return value


def load_pkcs1_private_key(der):
    decode_exact(der, rfc2437.RSAPrivateKey())
    return serialization.load_der_private_key(der, password=None, backend=default_backend())


def load_pkcs8_private_key(der):
    decode_exact(der, rfc5208.PrivateKeyInfo())
    return serialization.load_der_private_key(der, password=None, backend=default_backend())


def load_pkcs1_public_key(der):
    decode_exact(der, rfc2437.RSAPublicKey())
    return serialization.load_der_public_key(der, backend=default_backend())


def load_pkix_public_key(der):
    decode_exact(der, rfc2459.SubjectPublicKeyInfo())
    return serialization.load_der_public_key(der, backend=default_backend())


# Tried in order, first decoder that succeeds wins
PRIVATE_KEY_DECODERS = (
    (KeyFormat.PKCS1, load_pkcs1_private_key),
    (KeyFormat.PKCS8, load_pkcs8_private_key),
)

PUBLIC_KEY_DECODERS = (
    (KeyFormat.PKCS1, load_pkcs1_public_key),
    (KeyFormat.PKCS8, load_pkix_public_key),
)


def classify(data, decoders):
    try:
        der = extract_der(data)
    except DecodeError as e:
        logger.debug('Cannot extract DER: %s', e)
        return KeyFormat.UNKNOWN

    for key_format, load in decoders:
        try:
            load(der)
        except LOAD_ERRORS as e:
            logger.debug('Not %s (%s): %s', key_format, load.__name__, e)
            continue
        return key_format
    return KeyFormat.UNKNOWN


def classify_private_key(data):
    """Tell whether the input holds a PKCS#1 or a PKCS#8 private key. Never raises."""
    return classify(data, PRIVATE_KEY_DECODERS)


def classify_public_key(data):
    """Tell whether the input holds a PKCS#1 RSA public key or a PKIX public key. Never raises."""
    return classify(data, PUBLIC_KEY_DECODERS)


def is_public_key(data):
    """True iff the input is a PKIX (SubjectPublicKeyInfo) public key"""
    try:
        load_pkix_public_key(extract_der(data))
    except (DecodeError,) + LOAD_ERRORS:
        return False
    return True


def format_key(kind, key_format, data):
    """
    Format a bare base64 key as a PEM block.

    Input that already starts with "-----BEGIN" is returned unchanged.
    Otherwise the newlines are removed, the base64 body is re-wrapped
    at 64 characters per line and the header and footer for
    (kind, key_format) are added.
    """
    data = to_bytes(data)
    if is_pem(data):
        return data

    label = PEM_LABELS.get((kind, key_format))
    if label is None:
        raise UnknownFormatError(f'unknown {kind} key format: {key_format}')

    try:
        body = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise DecodeError(f'key is not base64 text: {e}') from e
    return armor(label, body.replace('\r', '').replace('\n', ''))


def format_public_key(key_format, data):
    return format_key(KeyKind.PUBLIC, key_format, data)


def format_private_key(key_format, data):
    return format_key(KeyKind.PRIVATE, key_format, data)


def auto_format(data, kind=None):
    """
    Detect the key kind (unless given) and container, then format.

    Returns (pem, kind, key_format).
    """
    if kind is None:
        public_format = classify_public_key(data)
        kind = KeyKind.PRIVATE if public_format is KeyFormat.UNKNOWN else KeyKind.PUBLIC
    if kind is KeyKind.PUBLIC:
        key_format = classify_public_key(data)
    else:
        key_format = classify_private_key(data)
    logger.debug('Detected %s key in %s format', kind, key_format)
    return format_key(kind, key_format, data), kind, key_format


def pkcs8_to_pkcs1(data):
    """Convert a PKCS#8 RSA private key into a PKCS#1 "RSA PRIVATE KEY" PEM block"""
    try:
        der = extract_der(data)
    except DecodeError as e:
        raise ConversionError(str(e)) from e

    try:
        key = load_pkcs8_private_key(der)
    except LOAD_ERRORS as e:
        raise ConversionError(f'failed to parse PKCS8 private key: {e}') from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConversionError('found non-RSA key in PKCS8 encoding')

    logger.debug('Converting %d bit RSA key from PKCS8 to PKCS1', key.key_size)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    )


def pkcs1_to_pkcs8(data):
    """Convert a PKCS#1 RSA private key into a PKCS#8 "PRIVATE KEY" PEM block"""
    try:
        der = extract_der(data)
    except DecodeError as e:
        raise ConversionError(str(e)) from e

    try:
        key = load_pkcs1_private_key(der)
    except LOAD_ERRORS as e:
        raise ConversionError(f'failed to parse PKCS1 private key: {e}') from e

    logger.debug('Converting %d bit RSA key from PKCS1 to PKCS8', key.key_size)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    )


CONVERTERS = {
    KeyFormat.PKCS1: pkcs8_to_pkcs1,
    KeyFormat.PKCS8: pkcs1_to_pkcs8,
}


def convert(data, target):
    """Convert a private key to the target format, given as "pkcs1" or "pkcs8" in any case"""
    try:
        key_format = KeyFormat(str(target).upper())
    except ValueError:
        key_format = None
    if key_format not in CONVERTERS:
        raise UnknownFormatError(f'unknown target format: {target}, use pkcs1 or pkcs8')
    return CONVERTERS[key_format](data)
