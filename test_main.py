import io
import logging
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

import main
from errors import DecryptionFailure


class TestMain(unittest.TestCase):

    def test_prints_four_lines_and_succeeds(self):
        out = io.StringIO()
        with redirect_stdout(out):
            status = main.main()

        self.assertEqual(status, 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 4)
        self.assertEqual(lines[1], 'Bob receives the message from Alice: "Hello, Bob!"')
        self.assertEqual(lines[3], 'Alice receives the message from Bob: "Hello, Alice!"')

    @patch("main.LOG_LEVEL", "DEBUG")
    def test_debug_logging_stays_off_stdout(self):
        # Start from an unconfigured root logger so basicConfig installs a stderr handler
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        root.handlers = []
        self.addCleanup(setattr, root, "handlers", saved_handlers)
        self.addCleanup(root.setLevel, saved_level)

        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main.main()

        self.assertEqual(status, 0)
        self.assertEqual(len(out.getvalue().splitlines()), 4)
        self.assertIn("Generated 2048-bit RSA key", err.getvalue())

    @patch("main.logging.basicConfig")
    def test_unknown_log_level_falls_back_to_warning(self, mock_basic_config):
        for name in ("BASIC_FORMAT", "chatty", "DEBUG"):
            with self.subTest(name=name), patch("main.LOG_LEVEL", name), patch("main.run_exchange"):
                main.main()
                expected = logging.DEBUG if name == "DEBUG" else logging.WARNING
                self.assertEqual(mock_basic_config.call_args.kwargs["level"], expected)

    @patch("main.run_exchange")
    def test_failure_reported_on_stderr(self, mock_run_exchange):
        mock_run_exchange.side_effect = DecryptionFailure("bad padding")
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main.main()

        self.assertEqual(status, 1)
        self.assertEqual(out.getvalue(), "")
        self.assertIn("Error: bad padding", err.getvalue())


if __name__ == "__main__":
    unittest.main()
