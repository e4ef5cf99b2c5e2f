"""CLI argument and output-mode tests.

Verifies how ``prcomments.cli.main`` dispatches between printed output and
interactive sessions, and how session outcomes are reported.
"""

from __future__ import annotations

import io
import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from prcomments import cli
from prcomments.items import SelectableItem
from prcomments.runtime.flow import FlowOutcome


class _FakeStdout(io.StringIO):
    def __init__(self, *, tty: bool = False) -> None:
        super().__init__()
        self.buffer = io.BytesIO()
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch("prcomments.cli.configure_logging")
        self.addCleanup(patcher.stop)
        patcher.start()

    def test_nopager_prints_indented_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "doc.json"
            target.write_text('{"a":[1,2]}', encoding="utf-8")
            stdout = _FakeStdout()

            with mock.patch.object(sys, "argv", ["prcomments", str(target), "--nopager", "--no-color"]), mock.patch.object(
                sys, "stdout", stdout
            ):
                cli.main()

        self.assertEqual(stdout.getvalue(), json.dumps({"a": [1, 2]}, indent=2) + "\n")

    def test_non_tty_stdout_prints_instead_of_starting_ui(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "doc.json"
            target.write_text('{"a": 1}', encoding="utf-8")
            stdout = _FakeStdout()

            with mock.patch.object(sys, "argv", ["prcomments", str(target), "--no-color"]), mock.patch.object(
                sys, "stdout", stdout
            ), mock.patch("prcomments.cli.run_explore_only") as run_explore_only:
                cli.main()

        run_explore_only.assert_not_called()
        self.assertIn('"a"', stdout.getvalue())

    def test_invalid_json_exits_with_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "doc.json"
            target.write_text("{", encoding="utf-8")

            with mock.patch.object(sys, "argv", ["prcomments", str(target), "--nopager"]), mock.patch.object(
                sys, "stdout", _FakeStdout()
            ):
                with self.assertRaises(SystemExit) as ctx:
                    cli.main()

        self.assertIn("error: invalid JSON", str(ctx.exception.code))

    def test_path_and_items_cannot_be_combined(self) -> None:
        with mock.patch.object(sys, "argv", ["prcomments", "doc.json", "--items", "items.json"]):
            with self.assertRaises(SystemExit):
                cli.main()

    def test_items_session_uses_file_fetch_and_prints_selection(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            items_path = Path(tmp) / "items.json"
            items_path.write_text(json.dumps([{"title": "one", "payload": {"k": 1}}]), encoding="utf-8")
            stdout = _FakeStdout(tty=True)
            chosen = SelectableItem("one", "one", payload=b'{"k": 1}')
            outcome = FlowOutcome.selected(chosen, warnings=("two: timeout",))
            stderr = io.StringIO()

            with mock.patch.object(
                sys, "argv", ["prcomments", "--items", str(items_path), "--print-selected"]
            ), mock.patch.object(sys, "stdout", stdout), mock.patch.object(sys, "stderr", stderr), mock.patch(
                "prcomments.cli.run_selection", return_value=outcome
            ) as run_selection, mock.patch(
                "prcomments.cli.load_session_config"
            ):
                cli.main()

        items, fetch = run_selection.call_args.args
        self.assertEqual([item.title for item in items], ["one"])
        self.assertIs(fetch, cli.read_item_payload)
        self.assertEqual(stdout.buffer.getvalue(), b'{"k": 1}\n')
        self.assertEqual(stderr.getvalue(), "warning: two: timeout\n")

    def test_fatal_outcome_exits_with_error_message(self) -> None:
        outcome = FlowOutcome.fatal(RuntimeError("failed to load all 2 items"))

        with self.assertRaises(SystemExit) as ctx:
            cli.report_outcome(outcome, print_selected=False)

        self.assertEqual(ctx.exception.code, "error: failed to load all 2 items")

    def test_items_listing_printed_without_terminal(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            items_path = Path(tmp) / "items.json"
            items_path.write_text(
                json.dumps([{"title": "one", "description": "first", "payload": 1}, {"title": "two", "payload": 2}]),
                encoding="utf-8",
            )
            stdout = _FakeStdout()

            with mock.patch.object(sys, "argv", ["prcomments", "--items", str(items_path)]), mock.patch.object(
                sys, "stdout", stdout
            ):
                cli.main()

        self.assertEqual(stdout.getvalue(), "one  first\ntwo\n")


if __name__ == "__main__":
    unittest.main()
