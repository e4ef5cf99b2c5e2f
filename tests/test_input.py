"""Regression tests for raw-key decoding.

Covers ESC timing, arrow/paging sequences, and control-key token mapping.
These tests protect interactive input handling in raw terminal mode.
"""

import os
import time
import unittest

from prcomments.input import keys as keys_mod
from prcomments.input.key_registry import KeyComboRegistry


def _read_all(data: bytes, count: int) -> list[str]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, data)
        return [keys_mod.read_key(read_fd, timeout_ms=20) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyRegressionTests(unittest.TestCase):
    def setUp(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def tearDown(self) -> None:
        keys_mod._PENDING_BYTES.clear()

    def test_single_escape_returns_esc_without_second_keypress(self) -> None:
        started = time.monotonic()
        key = _read_all(b"\x1b", 1)[0]
        elapsed = time.monotonic() - started

        self.assertEqual(key, "ESC")
        self.assertLess(elapsed, 0.2)

    def test_arrow_and_navigation_sequences(self) -> None:
        cases = {
            b"\x1b[A": "UP",
            b"\x1b[B": "DOWN",
            b"\x1b[C": "RIGHT",
            b"\x1b[D": "LEFT",
            b"\x1bOA": "UP",
            b"\x1b[H": "HOME",
            b"\x1b[F": "END",
            b"\x1b[1~": "HOME",
            b"\x1b[4~": "END",
            b"\x1b[5~": "PGUP",
            b"\x1b[6~": "PGDN",
            b"\x1b[1;5B": "DOWN",
        }
        for data, expected in cases.items():
            with self.subTest(data=data):
                self.assertEqual(_read_all(data, 1), [expected])

    def test_escape_does_not_swallow_following_printable_key(self) -> None:
        self.assertEqual(_read_all(b"\x1ba", 2), ["ESC", "a"])

    def test_control_keys_map_to_tokens(self) -> None:
        self.assertEqual(
            _read_all(b"\x02\x03\x04\x06\x15\r\x7f\t", 8),
            ["CTRL_B", "CTRL_C", "CTRL_D", "CTRL_F", "CTRL_U", "ENTER", "BACKSPACE", "TAB"],
        )

    def test_utf8_multibyte_character_is_one_key(self) -> None:
        self.assertEqual(_read_all("é漢".encode("utf-8"), 2), ["é", "漢"])

    def test_timeout_without_input_returns_empty_token(self) -> None:
        self.assertEqual(_read_all(b"", 1), [""])


class KeyComboRegistryTests(unittest.TestCase):
    def test_first_binding_for_a_combo_wins(self) -> None:
        calls: list[str] = []
        registry = (
            KeyComboRegistry()
            .bind(("ENTER",), lambda: calls.append("first") or True)
            .bind(("ENTER", "x"), lambda: calls.append("second") or True)
        )

        self.assertTrue(registry.dispatch("ENTER"))
        self.assertTrue(registry.dispatch("x"))
        self.assertEqual(calls, ["first", "second"])
        self.assertTrue(registry.handles("x"))
        self.assertIsNone(registry.dispatch("missing"))


if __name__ == "__main__":
    unittest.main()
