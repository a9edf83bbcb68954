from flask import Flask, request, jsonify
import logging

from ktool.certs import parse_certificate, serial_number_hex
from ktool.errors import KtoolError
from ktool.keys import KeyKind, auto_format, classify_private_key, classify_public_key, convert
from ktool.log import SensitiveDataFilter, setup_logging

logger = logging.getLogger(__name__)

app = Flask(__name__)

# SECURITY: no session-based storage of key material
app.config['SESSION_COOKIE_SECURE'] = True
app.config['SESSION_COOKIE_HTTPONLY'] = True
app.config['PERMANENT_SESSION_LIFETIME'] = 0
app.config['MAX_CONTENT_LENGTH'] = 64 * 1024
app.config.from_prefixed_env('KTOOL')

logging.getLogger('werkzeug').setLevel(logging.WARNING)
# app.logger is the module logger, filtered whatever handlers get attached later
app.logger.addFilter(SensitiveDataFilter())

# Endpoints that may receive private keys in the request body
SENSITIVE_PATHS = ('/api/format', '/api/convert', '/api/info')


class InvalidInput(Exception):
    pass


@app.before_request
def suppress_request_logging():
    """Suppress request logging for endpoints that handle private keys"""
    if request.path in SENSITIVE_PATHS:
        werkzeug_logger = logging.getLogger('werkzeug')
        request._original_log_level = werkzeug_logger.level
        werkzeug_logger.setLevel(logging.ERROR)


@app.after_request
def restore_request_logging(response):
    if hasattr(request, '_original_log_level'):
        logging.getLogger('werkzeug').setLevel(request._original_log_level)
    return response


@app.errorhandler(InvalidInput)
def handle_invalid_input(e):
    return jsonify({'success': False, 'error': str(e)}), 400


@app.errorhandler(KtoolError)
def handle_ktool_error(e):
    logger.info('%s: %s', type(e).__name__, e)
    return jsonify({'success': False, 'error': str(e)}), 400


def get_field(name):
    """Read a required non-empty text field from the JSON body"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput('Request body must be a JSON object.')
    value = data.get(name, '')
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f'The "{name}" field is empty. Please paste a key or certificate.')
    return value


def get_optional_field(name):
    data = request.get_json(silent=True) or {}
    return data.get(name) or None


@app.route('/')
def index():
    return jsonify({
        'tools': {
            'format': '/api/format',
            'convert': '/api/convert',
            'serial': '/api/serial',
            'info': '/api/info',
        }
    })


@app.route('/api/format', methods=['POST'])
def format_key_endpoint():
    key_text = get_field('key')
    kind = get_optional_field('kind')
    if kind is not None:
        try:
            kind = KeyKind(kind)
        except ValueError:
            raise InvalidInput(f'Unknown key kind "{kind}", use "public" or "private".')

    pem, kind, key_format = auto_format(key_text, kind)
    return jsonify({
        'success': True,
        'output': pem.decode('utf-8'),
        'kind': str(kind),
        'format': str(key_format),
    })


@app.route('/api/convert', methods=['POST'])
def convert_endpoint():
    key_text = get_field('key')
    target = get_field('target')
    pem = convert(key_text, target)
    return jsonify({'success': True, 'output': pem.decode('utf-8'), 'target': target.lower()})


@app.route('/api/serial', methods=['POST'])
def serial_endpoint():
    cert = parse_certificate(get_field('certificate'))
    return jsonify({'success': True, 'serial_number': serial_number_hex(cert)})


@app.route('/api/info', methods=['POST'])
def info_endpoint():
    key_text = get_field('key')
    return jsonify({
        'success': True,
        'format': str(classify_private_key(key_text)),
        'public_format': str(classify_public_key(key_text)),
    })


if __name__ == '__main__':
    setup_logging(logging.INFO)
    app.run(host='127.0.0.1', port=8000)
