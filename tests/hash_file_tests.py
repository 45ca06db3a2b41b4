import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from hash_file import EXIT_FAILURE, EXIT_USAGE, build_parser, hash_file, main
from ripemd_errors import AllocationFailure, SourceUnavailable


class TestHashFile(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "input-01.txt")
        with open(self.path, "wb") as f:
            f.write(b"This is a short input file.\n")

    def tearDown(self):
        self.tmpdir.cleanup()

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main(argv)
        return status, out.getvalue(), err.getvalue()

    def test_hash_file(self):
        self.assertEqual(hash_file(self.path), "ca7c79428444ad2747e8db47cf13868f63bd1961")

    def test_hash_empty_file(self):
        path = os.path.join(self.tmpdir.name, "empty")
        open(path, "wb").close()
        self.assertEqual(hash_file(path), "9c1185a5c5e9fc54612808977ee8f548b2258d31")

    def test_hash_file_missing(self):
        with self.assertRaises(SourceUnavailable):
            hash_file(os.path.join(self.tmpdir.name, "no-input-file.txt"))

    def test_main_prints_digest(self):
        status, out, err = self._run([self.path])
        self.assertEqual(status, 0)
        self.assertEqual(out, "ca7c79428444ad2747e8db47cf13868f63bd1961\n")
        self.assertEqual(err, "")

    def test_main_missing_file(self):
        missing = os.path.join(self.tmpdir.name, "no-input-file.txt")
        status, out, err = self._run([missing])
        self.assertEqual(status, EXIT_FAILURE)
        self.assertEqual(out, "")
        self.assertIn(missing, err)

    def test_main_out_of_memory(self):
        with mock.patch("hash_file.read_file", side_effect=AllocationFailure(10)):
            status, out, err = self._run([self.path])
        self.assertEqual(status, EXIT_FAILURE)
        self.assertEqual(out, "")
        self.assertEqual(err, f"{self.path}: unable to allocate 10 bytes\n")

    def test_main_no_arguments(self):
        status, out, err = self._run([])
        self.assertEqual(status, EXIT_USAGE)
        self.assertEqual(out, "")
        self.assertIn("usage:", err)

    def test_main_too_many_arguments(self):
        status, out, err = self._run([self.path, self.path])
        self.assertEqual(status, EXIT_USAGE)
        self.assertEqual(out, "")
        self.assertIn("usage:", err)

    def test_main_bad_log_level(self):
        status, out, err = self._run(["--log-level", "LOUD", self.path])
        self.assertEqual(status, EXIT_USAGE)
        self.assertIn("Invalid logging level", err)

    def test_log_level_parsing(self):
        parser = build_parser()
        self.assertEqual(parser.parse_args([self.path]).log_level, 30)
        self.assertEqual(parser.parse_args(["-l", "debug", self.path]).log_level, 10)
        self.assertEqual(parser.parse_args(["--log-level", "40", self.path]).log_level, 40)


if __name__ == "__main__":
    unittest.main(verbosity=1)
