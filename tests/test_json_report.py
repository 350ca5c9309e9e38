from datetime import datetime, timezone
import io
import json
from pathlib import Path
import unittest

from rich.console import Console

from wrfoutput.analyzer import parse, parse_file
from wrfoutput.errors import (
    MarshalError,
    MissingStartInstantError,
    StreamIncompleteError,
    UnmarshalError,
)
from wrfoutput.models import OutputFile
from wrfoutput.report.json_report import read_json_lines, record_to_dict, write_json_lines
from wrfoutput.report.terminal import render_records

FIXTURES = Path(__file__).parent / "fixtures"
RSL = FIXTURES / "rsl.out.0000"


class FailingWriter(io.StringIO):
    def write(self, s):
        raise OSError("TEST")


class JsonLinesTests(unittest.TestCase):
    def test_record_to_dict(self):
        record = OutputFile(
            "wrfout", 1, datetime(2021, 8, 4, tzinfo=timezone.utc), 0, "wrfout_d01_2021-08-04_00:00:00"
        )
        self.assertEqual(record_to_dict(record), {
            "kind": "wrfout",
            "domain": 1,
            "instant": "2021-08-04T00:00:00+00:00",
            "hour_offset": 0,
            "filename": "wrfout_d01_2021-08-04_00:00:00",
        })

    def test_marshal_then_unmarshal(self):
        out = io.StringIO()
        with open(RSL) as f:
            self.assertEqual(write_json_lines(f, out, timeout=1), 100)

        lines = out.getvalue().splitlines()
        self.assertEqual(json.loads(lines[10])["filename"], "wrfout_d03_2021-08-04_02:00:00")

        actual = read_json_lines(io.StringIO(out.getvalue())).collect()
        with open(RSL) as f:
            expected = parse(f, timeout=1).collect()
        self.assertEqual(actual, expected)

    def test_marshal_reports_stream_failure(self):
        with open(FIXTURES / "wrong-without-start-instant") as f:
            with self.assertRaises(MissingStartInstantError):
                write_json_lines(f, io.StringIO(), timeout=1)

    def test_marshal_on_failing_writer(self):
        with open(RSL) as f:
            with self.assertRaises(MarshalError) as ctx:
                write_json_lines(f, FailingWriter(), timeout=1)
        self.assertEqual(str(ctx.exception), "Marshal failed: error while writing: TEST")

    def test_unmarshal_wrong_json(self):
        with self.assertRaises(UnmarshalError) as ctx:
            read_json_lines(["TEST\n"]).collect()
        self.assertTrue(str(ctx.exception).startswith("Unmarshal failed: error while reading: "))

    def test_unmarshal_missing_field(self):
        with self.assertRaises(UnmarshalError):
            read_json_lines(['{"kind": "wrfout"}\n']).collect()

    def test_unmarshal_non_utf8_line(self):
        good = json.dumps(record_to_dict(OutputFile(
            "wrfout", 1, datetime(2021, 8, 4, tzinfo=timezone.utc), 0, "wrfout_d01_2021-08-04_00:00:00"
        ))).encode() + b"\n"
        items = list(read_json_lines([good, b"\xff\xfe garbage\n", good]))
        self.assertEqual(len(items), 2)
        self.assertIsInstance(items[0], OutputFile)
        self.assertIsInstance(items[1], UnmarshalError)
        self.assertIsInstance(items[1].__cause__, UnicodeDecodeError)

    def test_unmarshal_read_failure(self):
        def broken_after_record():
            yield json.dumps({
                "kind": "wrfout", "domain": 1, "instant": "2021-08-04T00:00:00+00:00",
                "hour_offset": 0, "filename": "wrfout_d01_2021-08-04_00:00:00",
            })
            raise RuntimeError("pipe reset")

        items = list(read_json_lines(broken_after_record()))
        self.assertEqual(len(items), 2)
        self.assertEqual(str(items[1]), "Unmarshal failed: error while reading: pipe reset")


class TerminalTests(unittest.TestCase):
    def test_render_completed_run(self):
        buf = io.StringIO()
        console = Console(file=buf, width=140, no_color=True)
        self.assertTrue(render_records(parse_file(RSL, timeout=1), console=console))
        output = buf.getvalue()
        self.assertIn("wrfout_d01_2021-08-04_00:00:00", output)
        self.assertIn("Files: 100 (auxhist23: 25, wrfout: 75)", output)

    def test_render_failed_run(self):
        buf = io.StringIO()
        console = Console(file=buf, width=140, no_color=True)
        lines = ["d01 2021-08-04_00:00:00 alloc_space_field: domain 1"]
        self.assertFalse(render_records(parse(lines, timeout=1), console=console))
        self.assertIn(str(StreamIncompleteError()), buf.getvalue())
