#!/usr/bin/env python

import logging
import sys
from functools import cached_property

from cli_command_parser import Command, SubCommand, ParamGroup, Positional, Option, Flag, Counter, main

from edid_tools.__version__ import __author_email__, __version__  # noqa
from edid_tools.config import ConfigException
from edid_tools.edid import Edid
from edid_tools.exceptions import EdidError
from edid_tools.output.printer import PRINTER_FORMATS

log = logging.getLogger(__name__)


class EdidInfo(Command, description='Decode monitor EDID data from a binary file or a hex dump'):
    action = SubCommand()
    path = Positional(help='Path to a file containing binary EDID data or a hex dump (use - to read hex from stdin)')
    config = Option('-c', metavar='PATH', help='Path to a YAML or JSON file with decoder settings')
    with ParamGroup('Logging'):
        verbose = Counter('-v', help='Increase logging verbosity (can specify multiple times)')
        log_file = Option('-L', metavar='PATH', help='Also write logs to the given file')

    def _init_command_(self):
        from edid_tools.logging import init_logging

        init_logging(self.verbose, log_path=self.log_file)

    @cached_property
    def edid(self) -> Edid:
        from edid_tools.config import DecoderConfig

        config = DecoderConfig.from_file(self.config) if self.config else None
        if self.path == '-':
            return Edid.from_hex(sys.stdin.read(), config)
        return Edid.from_file(self.path, config)


class Show(EdidInfo, help='Show a summary of the EDID data'):
    resolutions = Flag('-r', help='Include the supported resolutions in the summary')

    def main(self):
        from edid_tools.output.report import format_report

        print(format_report(self.edid, resolutions=self.resolutions))


class Resolutions(EdidInfo, help='List the resolutions that the monitor advertises as supported'):
    format = Option('-f', choices=PRINTER_FORMATS, default='plain', help='Output format')

    def main(self):
        from edid_tools.output.printer import Printer

        Printer(self.format).pprint(self.edid.resolutions)


class Dump(EdidInfo, help='Show all decoded fields'):
    with ParamGroup('Output'):
        format = Option('-f', choices=PRINTER_FORMATS, default='yaml', help='Output format')
        hex = Flag('-x', help='Include a hex dump of the raw data')

    def main(self):
        from edid_tools.output.printer import Printer

        info = self.edid.as_dict()
        if self.hex:
            info['hex'] = self.edid.data.hex(' ')
        Printer(self.format).pprint(info)


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print()
    except (EdidError, ConfigException, OSError) as e:
        log.error(f'Unable to decode EDID data: {e}', extra={'color': 'red'})
        sys.exit(1)
