"""Inspect and reformat RSA keys and X.509 certificates.

Wraps bare base64 keys into PEM blocks, converts RSA private keys
between PKCS#1 and PKCS#8 and reads certificate serial numbers.

Typical usage example:

    fmt = classify_private_key(data)
    pem = format_private_key(fmt, data)
    pkcs1 = pkcs8_to_pkcs1(pem)
    serial = serial_number_hex(parse_certificate(cert_pem))
"""
from ktool.certs import parse_certificate
from ktool.certs import serial_number_hex
from ktool.errors import ConversionError
from ktool.errors import DecodeError
from ktool.errors import KtoolError
from ktool.errors import UnknownFormatError
from ktool.keys import KeyFormat
from ktool.keys import KeyKind
from ktool.keys import auto_format
from ktool.keys import classify_private_key
from ktool.keys import classify_public_key
from ktool.keys import convert
from ktool.keys import format_key
from ktool.keys import format_private_key
from ktool.keys import format_public_key
from ktool.keys import is_public_key
from ktool.keys import pkcs1_to_pkcs8
from ktool.keys import pkcs8_to_pkcs1
from ktool.pem import decode_pem
from ktool.pem import extract_der

__version__ = "0.1.0"
__all__ = [
    "KeyFormat",
    "KeyKind",
    "KtoolError",
    "DecodeError",
    "ConversionError",
    "UnknownFormatError",
    "classify_private_key",
    "classify_public_key",
    "is_public_key",
    "auto_format",
    "format_key",
    "format_public_key",
    "format_private_key",
    "pkcs8_to_pkcs1",
    "pkcs1_to_pkcs8",
    "convert",
    "parse_certificate",
    "serial_number_hex",
    "decode_pem",
    "extract_der",
]
