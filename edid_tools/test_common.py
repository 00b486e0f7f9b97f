"""
Common test helpers and sample EDID data

:author: Doug Skrypa
"""

import logging
import sys
from argparse import ArgumentParser
from typing import Mapping
from unittest import TestCase, main as unittest_main

from .constants import BLOCK_SIZE, HEADER, STANDARD_OFFSET, STANDARD_END
from .logging import init_logging

__all__ = ['TestCaseBase', 'main', 'build_edid', 'DELL_P2418HT_HEX', 'DELL_P2418HT']
log = logging.getLogger(__name__)

# Dell P2418HT, with a CTA-861 extension block
DELL_P2418HT_HEX = """
00 ff ff ff ff ff ff 00 10 ac 13 41 4c 57 53 42 16 1c 01 04 a5 35 1e 78 3e ee 95 a3 54 4c 99 26
0f 50 54 a5 4b 80 71 4f 81 00 81 80 a9 c0 d1 c0 01 01 01 01 01 01 02 3a 80 18 71 38 2d 40 58 2c
45 00 0f 28 21 00 00 1e 00 00 00 ff 00 54 56 54 37 46 38 35 55 42 53 57 4c 0a 00 00 00 fc 00 44
45 4c 4c 20 50 32 34 31 38 48 54 0a 00 00 00 fd 00 32 4c 1e 53 11 00 0a 20 20 20 20 20 20 01 7e
02 03 18 f1 4b 90 05 04 03 02 01 11 12 13 14 1f 23 09 07 07 83 01 00 00 02 3a 80 18 71 38 2d 40
58 2c 45 00 0f 28 21 00 00 1e 01 1d 80 18 71 1c 16 20 58 2c 25 00 0f 28 21 00 00 9e 01 1d 00 72
51 d0 1e 20 6e 28 55 00 0f 28 21 00 00 1e 8c 0a d0 8a 20 e0 2d 10 10 3e 96 00 0f 28 21 00 00 18
00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 00 cf
"""
DELL_P2418HT = bytes.fromhex(DELL_P2418HT_HEX)


def build_edid(values: Mapping[int, int] = None, size: int = BLOCK_SIZE, unused_standard: bool = True) -> bytearray:
    """
    :param values: Mapping of {offset: byte value} to set in the returned buffer
    :param size: The total size of the buffer
    :param unused_standard: Fill the standard timing table with the ``01 01`` unused marker
    :return: A zero-filled buffer with a valid EDID header and the given bytes set
    """
    data = bytearray(size)
    if size >= len(HEADER):
        data[:len(HEADER)] = HEADER
    if unused_standard and size >= BLOCK_SIZE:
        data[STANDARD_OFFSET : STANDARD_END + 1] = b'\x01' * (STANDARD_END + 1 - STANDARD_OFFSET)
    if values:
        for offset, value in values.items():
            data[offset] = value
    return data


def main(description='Unit Tests', logging_kwargs=None, **kwargs):
    parser = ArgumentParser(description)
    parser.add_argument('--include', '-i', nargs='+', help='Names of test functions to include (default: all)')
    parser.add_argument('--verbose', '-v', action='count', default=0, help='Logging verbosity (can be specified multiple times to increase verbosity)')
    args, argv = parser.parse_known_args()
    logging_kwargs = logging_kwargs or {}
    logging_kwargs.setdefault('names', None)
    init_logging(args.verbose, log_path=None, **logging_kwargs)

    argv.insert(0, sys.argv[0])
    if args.include:
        test_classes = set(TestCaseBase.__subclasses__())
        for cls in TestCaseBase.__subclasses__():
            test_classes.update(cls.__subclasses__())
        names = {m: f'{cls.__name__}.{m}' for cls in test_classes for m in dir(cls)}
        for method_name in args.include:
            argv.append(names.get(method_name, method_name))

    if args.verbose:
        TestCaseBase._maybe_print = print

    kwargs.setdefault('exit', False)
    kwargs.setdefault('verbosity', 2)
    kwargs.setdefault('warnings', 'ignore')
    try:
        unittest_main(argv=argv, **kwargs)
    except KeyboardInterrupt:
        print()


class TestCaseBase(TestCase):
    _maybe_print = lambda s: None

    def setUp(self):
        self._maybe_print()

    def tearDown(self):
        self._maybe_print()
