class KtoolError(Exception):
    """Base error type for key and certificate operations."""


class DecodeError(KtoolError):
    """Raised when PEM, base64 or DER input cannot be decoded."""


class ConversionError(KtoolError):
    """Raised when a private key cannot be converted between PKCS#1 and PKCS#8."""


class UnknownFormatError(KtoolError):
    """Raised when a key format is not recognized."""
