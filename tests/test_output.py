#!/usr/bin/env python

import json
import logging
import sys
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path

import yaml

sys.path.append(Path(__file__).parents[1].as_posix())
from edid_tools.edid import Edid
from edid_tools.output import Printer, PRINTER_FORMATS, format_report, colored
from edid_tools.output.color import InvalidAnsiCode
from edid_tools.output.printer import format_tiered
from edid_tools.resolutions import ResolutionSet
from edid_tools.serialization import PermissiveJSONEncoder, prep_for_yaml, yaml_dump
from edid_tools.test_common import TestCaseBase, main, build_edid, DELL_P2418HT

log = logging.getLogger(__name__)

DELL_REPORT = """
  Manuf. ID=DEL, Product ID=4113, Digital, Serial=BSWL, ManufDate=6/2018, EDID v1.4
  53 x 30 cm (20.9 x 11.8 in)
  Preferred Timing: Clock 148MHz, Active Pixels 1920x1080
  Serial Number: TVT7F85UBSWL
  Monitor Name: DELL P2418HT
  Range Limits: Field Rate 50-76 Hz vertical, 30-83 Hz horizontal, Max clock: 170 MHz
""".strip('\n')


class ReportTest(TestCaseBase):
    def test_dell_report(self):
        self.assertEqual(DELL_REPORT, format_report(Edid(DELL_P2418HT)))
        self.assertEqual(DELL_REPORT, str(Edid(DELL_P2418HT)))

    def test_report_with_resolutions(self):
        lines = format_report(Edid(DELL_P2418HT), resolutions=True, indent='').splitlines()
        self.assertEqual(7, len(lines))
        self.assertTrue(lines[-1].startswith('Supported Resolutions: 720x400, 640x480, 800x600, '))
        self.assertTrue(lines[-1].endswith(', 720x480, 720x576'))

    def test_analog_report(self):
        report = format_report(Edid(build_edid({8: 0x04, 9: 0x43})), indent='')
        self.assertTrue(report.startswith('Manuf. ID=ABC, Product ID=0, Analog, Serial=00000000, ManufDate=1/1990'))


class PrinterTest(TestCaseBase):
    def test_invalid_format(self):
        with self.assertRaises(ValueError):
            Printer('xml')

    def test_all_formats_handled(self):
        for output_format in PRINTER_FORMATS:
            with self.subTest(output_format=output_format):
                self.assertIsInstance(Printer(output_format).pformat({'a': 1}), str)

    def test_no_format(self):
        content = {'a': 1}
        self.assertIs(content, Printer(None).pformat(content))

    def test_json(self):
        resolutions = ResolutionSet(['1920x1080', '1280x720'])
        self.assertEqual('["1920x1080", "1280x720"]', Printer('json').pformat(resolutions))
        self.assertEqual('["1920x1080","1280x720"]', Printer('json-compact').pformat(resolutions))
        self.assertEqual('{\n    "a": 1,\n    "b": 2\n}', Printer('json-pretty').pformat({'b': 2, 'a': 1}))

    def test_json_edid(self):
        info = json.loads(Printer('json').pformat(Edid(DELL_P2418HT)))
        self.assertEqual('DEL', info['manufacturer'])
        self.assertEqual([1, 4], info['version'])

    def test_yaml(self):
        content = {'b': [1, 2], 'a': 'x'}
        formatted = Printer('yaml').pformat(content)
        self.assertTrue(formatted.startswith('---\nb:\n'))
        self.assertEqual(content, yaml.safe_load(formatted))

    def test_yaml_edid(self):
        info = yaml.safe_load(Printer('yaml').pformat(Edid(DELL_P2418HT).as_dict()))
        self.assertEqual('P2418HT', info['model'])
        self.assertEqual(14, len(info['resolutions']))

    def test_plain(self):
        printer = Printer('plain')
        self.assertEqual('1920x1080\n1280x720', printer.pformat(ResolutionSet(['1920x1080', '1280x720'])))
        self.assertEqual('a: 1\nb: 2', printer.pformat({'a': 1, 'b': 2}))
        self.assertEqual('abc', printer.pformat('abc'))
        self.assertEqual('1', printer.pformat(1))

    def test_text(self):
        self.assertEqual('a: 1\nb:\n    - 1\n    - 2', Printer('text').pformat({'a': 1, 'b': [1, 2]}))

    def test_pprint(self):
        with redirect_stdout(StringIO()) as stdout:
            Printer('plain').pprint(ResolutionSet(['1920x1080']))
        self.assertEqual('1920x1080\n', stdout.getvalue())

    def test_pprint_generator(self):
        with redirect_stdout(StringIO()) as stdout:
            Printer('plain').pprint(r for r in ('a', 'b'))
        self.assertEqual('a\nb\n', stdout.getvalue())

    def test_pprint_empty_generator(self):
        with self.assertLogs('edid_tools.output.printer', 'ERROR'):
            Printer('plain').pprint((r for r in ()), gen_empty_error='No resolutions found')


class FormatTieredTest(TestCaseBase):
    def test_nested(self):
        content = {'descriptors': [{'type': 'Monitor Name', 'text': 'DELL'}], 'empty': []}
        expected = ['descriptors:', '    type: Monitor Name', '    text: DELL', '', 'empty: []']
        self.assertEqual(expected, list(format_tiered(content)))

    def test_scalar(self):
        self.assertEqual(['  abc'], list(format_tiered('abc', 2)))


class SerializationTest(TestCaseBase):
    def test_json_encoder(self):
        content = {'set': {'b', 'a'}, 'raw': b'\x00\xff', 'res': ResolutionSet(['b', 'a'])}
        expected = '{"set": ["a", "b"], "raw": "00ff", "res": ["b", "a"]}'
        self.assertEqual(expected, json.dumps(content, cls=PermissiveJSONEncoder))

    def test_json_encoder_unknown(self):
        with self.assertRaises(TypeError):
            json.dumps(object(), cls=PermissiveJSONEncoder)

    def test_prep_for_yaml(self):
        self.assertEqual({'a': ['x', 'y'], 'b': [1, 2]}, prep_for_yaml({'a': {'y', 'x'}, 'b': (1, 2)}))
        self.assertEqual(['b', 'a'], prep_for_yaml(ResolutionSet(['b', 'a'])))
        self.assertEqual('0102', prep_for_yaml(bytearray(b'\x01\x02')))

    def test_yaml_dump_multiple_documents(self):
        self.assertEqual(['a', 'b'], list(yaml.safe_load_all(yaml_dump(['a', 'b']))))


class ColorTest(TestCaseBase):
    def test_colored(self):
        self.assertEqual('abc', colored('abc'))
        self.assertEqual('', colored(''))
        self.assertEqual('\x1b[38;5;1mabc\x1b[0m', colored('abc', 'red'))
        self.assertEqual('\x1b[38;5;200m\x1b[48;5;4m\x1b[1mabc\x1b[0m', colored('abc', 200, 'blue', 'bold'))
        self.assertEqual('\x1b[38;5;1mabc', colored('abc', '1', reset=False))

    def test_invalid(self):
        for kwargs in ({'color': 'purple-ish'}, {'color': 256}, {'attrs': 'sparkly'}):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(InvalidAnsiCode):
                    colored('abc', **kwargs)


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        print()
