"""SDNV command line tool

Encodes integers into SDNVs and decodes SDNVs given as hex string or read from
a binary file.

Usage:
    If you are in the root directory of the project you can simply run:

    .. code:: bash

        python3 -m tools.sdnvtool encode 0x1234 4711
        python3 -m tools.sdnvtool decode a4348124
        python3 -m tools.sdnvtool encode -o values.bin 1 2 3
        python3 -m tools.sdnvtool decode -f values.bin

    This will execute the ``__main__.py`` script next to this file.
"""
import sys
import logging
import argparse

from pysdnv.big import decode_big, encode_big
from pysdnv.sdnv import MAX_BYTE_SIZE, decode, encode, encoded_size
from pysdnv.stream import iter_read, write


logger = logging.getLogger("pysdnv")


def parse_int(value):
    # Accepts decimal, hex (0x), octal (0o) and binary (0b) literals
    return int(value, 0)


def encode_values(values, big=False):
    """Returns the encoding of every value as hex string"""
    result = []
    for value in values:
        if big:
            buf = bytearray(encoded_size(value))
            size = encode_big(buf, value)
        else:
            buf = bytearray(MAX_BYTE_SIZE)
            size = encode(buf, value)
        result.append(buf[:size].hex())
    return result


def decode_hex(data, big=False):
    """Decodes all consecutive SDNVs in a hex string

    Returns:
        list: ``(value, bytes_consumed)`` tuple for every SDNV
    """
    buf = bytes.fromhex(data)
    decode_func = decode_big if big else decode
    result = []
    offset = 0
    while offset < len(buf):
        value, size = decode_func(buf, offset)
        result.append((value, size))
        offset += size
    return result


def build_parser():
    parser = argparse.ArgumentParser(
        prog="sdnvtool",
        description="Encode and decode Self-Delimiting Numeric Values",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    encode_parser = subparsers.add_parser(
        "encode",
        help="encode integers into SDNVs",
    )
    encode_parser.add_argument(
        "values",
        nargs="+",
        type=parse_int,
        help="non-negative integers (decimal or 0x-prefixed hex)",
    )
    encode_parser.add_argument(
        "--big",
        action="store_true",
        help="allow values wider than 64 bits",
    )
    encode_parser.add_argument(
        "-o", "--output",
        default=None,
        help="write the SDNVs to this binary file instead of printing them",
    )

    decode_parser = subparsers.add_parser(
        "decode",
        help="decode consecutive SDNVs",
    )
    decode_parser.add_argument(
        "data",
        nargs="?",
        default=None,
        help="hex-encoded SDNVs",
    )
    decode_parser.add_argument(
        "-f", "--file",
        default=None,
        help="read the SDNVs from this binary file",
    )
    decode_parser.add_argument(
        "--big",
        action="store_true",
        help="allow values wider than 64 bits (hex input only)",
    )

    return parser


def run_encode(args):
    if args.output is not None:
        with open(args.output, "wb") as fd:
            for value in args.values:
                size = write(fd, value)
                logger.debug("Wrote %d bytes for %d", size, value)
        return

    for value, encoded in zip(args.values,
                              encode_values(args.values, args.big)):
        print("{:#x}\t{}".format(value, encoded))


def run_decode(args):
    if args.file is not None:
        with open(args.file, "rb") as fd:
            records = list(iter_read(fd))
    else:
        records = decode_hex(args.data, args.big)

    for value, size in records:
        print("{:#x}\t{}\t({} bytes)".format(value, value, size))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.big and (getattr(args, "output", None) or
                     getattr(args, "file", None)):
        parser.error("--big is only supported for hex input and output")
    if args.command == "decode" and (args.data is None) == (args.file is None):
        parser.error("exactly one of a hex string or --file is required")

    if args.verbose:
        # Enable logging on stderr
        logger.setLevel(logging.DEBUG)
        # One console handler per process
        if not logger.handlers:
            console = logging.StreamHandler()
            console.setLevel(logger.level)
            logger.addHandler(console)

    try:
        if args.command == "encode":
            run_encode(args)
        else:
            run_decode(args)
    except ValueError as err:
        print("error: {}".format(err), file=sys.stderr)
        return 1

    return 0
