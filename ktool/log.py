import logging
import re

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

PRIVATE_KEY_RE = re.compile(r'-----BEGIN.*?PRIVATE KEY-----.*?-----END.*?PRIVATE KEY-----', re.DOTALL)
JSON_KEY_RE = re.compile(r'"(private_key|key)":\s*"[^"]*"')


class SensitiveDataFilter(logging.Filter):
    """Redact private keys from log messages"""

    def filter(self, record):
        if record.msg:
            msg = str(record.msg)
            msg = PRIVATE_KEY_RE.sub('[PRIVATE KEY REDACTED]', msg)
            msg = JSON_KEY_RE.sub(r'"\1": "[REDACTED]"', msg)
            record.msg = msg
        if isinstance(record.args, tuple):
            record.args = tuple(
                PRIVATE_KEY_RE.sub('[PRIVATE KEY REDACTED]', arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def setup_logging(level=logging.WARNING):
    logging.basicConfig(level=level, format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if not any(isinstance(f, SensitiveDataFilter) for f in handler.filters):
            handler.addFilter(SensitiveDataFilter())
