# tests/ui/test_keymap.py
"""
キー配置定義（Qt非依存部分）の単体テスト。
"""
import pytest
from chip8_tracer.ui.keymap import (
    DEFAULT_KEYMAP, KEYPAD_LAYOUT, build_keymap, lookup, keypad_position,
)

class TestKeymap:
    # @intent:test_case 既定の対応表が16個の論理キーを漏れなく重複なく網羅することを検証します。
    def test_default_keymap_covers_all_keys(self):
        assert sorted(DEFAULT_KEYMAP.values()) == list(range(16))
        assert sorted(k for row in KEYPAD_LAYOUT for k in row) == list(range(16))

    def test_lookup_is_case_insensitive(self):
        keymap = build_keymap()
        assert lookup(keymap, "q") == 0x4
        assert lookup(keymap, "X") == 0x0
        assert lookup(keymap, "") is None
        assert lookup(keymap, "P") is None

    def test_overrides(self):
        keymap = build_keymap({"j": 0x5})
        assert lookup(keymap, "J") == 0x5
        assert lookup(keymap, "W") == 0x5

    def test_override_out_of_range(self):
        with pytest.raises(ValueError):
            build_keymap({"j": 0x10})

    def test_keypad_position(self):
        assert keypad_position(0x1) == (0, 0)
        assert keypad_position(0x0) == (3, 1)
        assert keypad_position(0xF) == (3, 3)
        with pytest.raises(ValueError):
            keypad_position(0x10)

    # @intent:test_case キーパッドのボタン配置に用いる位置が16キーで重複しないことを検証します。
    def test_keypad_positions_fill_grid(self):
        positions = {keypad_position(key) for key in range(16)}
        assert positions == {(row, col) for row in range(4) for col in range(4)}
