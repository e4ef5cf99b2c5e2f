"""Input-layer public API for key decoding and key dispatch."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import DEFAULT_KEYMAP, Keymap, key_label, keys_label
from .keys import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "read_key",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "DEFAULT_KEYMAP",
    "Keymap",
    "key_label",
    "keys_label",
]
