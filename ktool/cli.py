import argparse
import logging
import os
import sys

from ktool.certs import parse_certificate, serial_number_hex
from ktool.errors import KtoolError
from ktool.keys import KeyKind, auto_format, classify_private_key, convert
from ktool.log import setup_logging

logger = logging.getLogger(__name__)

TOOLS = ('format', 'serial', 'convert', 'info', 'serve')


def build_parser():
    parser = argparse.ArgumentParser(
        prog='ktool',
        description='Inspect and reformat RSA keys and X.509 certificates'
    )
    parser.add_argument('-v', '--verbose', dest='verbose', action='store_true',
                        help='enables debug logging')
    sub = parser.add_subparsers(dest='tool', metavar='<tool>')

    p_format = sub.add_parser('format', help='wrap a bare base64 key into a PEM block')
    p_format.add_argument('-f', dest='file', required=True, help='file path')
    p_format.add_argument('-m', '--mode', dest='mode', choices=[k.value for k in KeyKind], default=None,
                          help='key kind, detected when omitted')

    p_serial = sub.add_parser('serial', help='print the serial number of a PEM certificate')
    p_serial.add_argument('-f', dest='file', required=True, help='file path')

    p_convert = sub.add_parser('convert', help='convert an RSA private key between PKCS1 and PKCS8')
    p_convert.add_argument('-t', dest='to', required=True, type=str.lower, choices=['pkcs1', 'pkcs8'],
                           help='convert to pkcs1 or pkcs8, example: ktool convert -t=pkcs1 -f=private.pem')
    p_convert.add_argument('-f', dest='file', required=True, help='file path')

    p_info = sub.add_parser('info', help='print the format of a private key')
    p_info.add_argument('-f', dest='file', required=True, help='file path')

    p_serve = sub.add_parser('serve', help='run the JSON web API')
    p_serve.add_argument('--host', dest='host', default='127.0.0.1')
    p_serve.add_argument('--port', dest='port', type=int, default=8000)

    return parser


def read_file(path):
    with open(path, 'rb') as hnd:
        return hnd.read()


def write_pem(pem):
    """Write PEM bytes as read, pass-through input need not be UTF-8"""
    if not pem.endswith(b'\n'):
        pem += b'\n'
    sys.stdout.flush()
    sys.stdout.buffer.write(pem)
    sys.stdout.buffer.flush()


def cmd_format(args):
    content = read_file(args.file)
    kind = KeyKind(args.mode) if args.mode else None
    try:
        pem, _, _ = auto_format(content, kind)
    except KtoolError as e:
        print(f'format err: {e}')
        return 1
    write_pem(pem)
    return 0


def cmd_serial(args):
    content = read_file(args.file)
    try:
        cert = parse_certificate(content)
    except KtoolError as e:
        print(f'parse certificate err: {e}')
        return 1
    print(serial_number_hex(cert))
    return 0


def cmd_convert(args):
    content = read_file(args.file)
    try:
        pem = convert(content, args.to)
    except KtoolError as e:
        print(f'convert err: {e}')
        return 1
    write_pem(pem)
    return 0


def cmd_info(args):
    content = read_file(args.file)
    print(f'file {args.file} format is: {classify_private_key(content)}')
    return 0


def cmd_serve(args):
    from ktool.app import app
    app.run(host=args.host, port=args.port)
    return 0


COMMANDS = {
    'format': cmd_format,
    'serial': cmd_serial,
    'convert': cmd_convert,
    'info': cmd_info,
    'serve': cmd_serve,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    else:
        level = os.environ.get('KTOOL_LOG_LEVEL', 'WARNING').upper()
    setup_logging(level)

    if args.tool is None:
        print('Usage: ktool <tool> [options]')
        print('Tools: ' + ', '.join(TOOLS))
        return 1

    try:
        return COMMANDS[args.tool](args)
    except OSError as e:
        print(f'{args.tool} err: {e}')
        logger.debug('%s failed', args.tool, exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
