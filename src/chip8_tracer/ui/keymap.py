"""
キー配置定義モジュール。

ホストのキーボード（キー名）からCHIP-8の論理キー(0x0-0xF)への対応表と、
画面上キーパッドのボタン配置を提供します。Qtには依存しません。
"""
from typing import Dict, List, Mapping, Optional, Tuple

# @intent:constant 画面上キーパッドの4x4配置（COSMAC VIPの配列）。
KEYPAD_LAYOUT: List[List[int]] = [
    [0x1, 0x2, 0x3, 0xC],
    [0x4, 0x5, 0x6, 0xD],
    [0x7, 0x8, 0x9, 0xE],
    [0xA, 0x0, 0xB, 0xF],
]

# @intent:constant ホストキーボード左側の4x4ブロックをキーパッド配置に対応させます。
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

# @intent:responsibility 既定の対応表に設定ファイルの上書きを適用した対応表を返します。
def build_keymap(overrides: Optional[Mapping[str, int]] = None) -> Dict[str, int]:
    keymap = dict(DEFAULT_KEYMAP)
    for name, key in (overrides or {}).items():
        if not 0 <= key <= 0xF:
            raise ValueError(f"Key {key} out of range (0x0-0xF).")
        keymap[name.upper()] = key
    return keymap

# @intent:responsibility ホストのキー名（テキスト）から論理キーを引きます。対応がなければNone。
def lookup(keymap: Mapping[str, int], name: str) -> Optional[int]:
    if not name:
        return None
    return keymap.get(name.upper())

# @intent:responsibility 論理キーの画面上キーパッドでの(行, 列)を返します。
def keypad_position(key: int) -> Tuple[int, int]:
    for row, keys in enumerate(KEYPAD_LAYOUT):
        if key in keys:
            return row, keys.index(key)
    raise ValueError(f"Key {key} out of range (0x0-0xF).")
