"""
例外階層を定義するモジュール。

デコードエラー（回復可能）、境界エラー（致命的）、構成エラーの3種類を区別します。
"""

# @intent:responsibility 本パッケージが送出する全ての例外の基底クラスです。
class Chip8Error(Exception):
    pass

# @intent:responsibility 既知のどのパターンにも一致しないオペコードを表します。
# @intent:rationale step()の外へ送出されることはなく、ログ出力用のメッセージとして生成されます。
class DecodeError(Chip8Error):
    def __init__(self, opcode: int, pc: int):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"Unknown opcode {opcode:#06x} at PC {pc:#05x}")

# @intent:responsibility メモリ、スタック、キーパッドのインデックスが有効範囲外であることを表します。
# @intent:post-condition この例外が送出された場合、セッションは終了しなければなりません。
class BoundsError(Chip8Error, IndexError):
    pass

class MemoryBoundsError(BoundsError):
    def __init__(self, address: int, size: int = 0x1000):
        self.address = address
        super().__init__(f"Address {address:#06x} out of bounds for memory of size {size:#06x}.")

class StackBoundsError(BoundsError):
    pass

class KeypadIndexError(BoundsError):
    def __init__(self, key: int):
        self.key = key
        super().__init__(f"Key index {key:#04x} out of range (0x0-0xF).")

# @intent:responsibility プログラムイメージや設定ファイルの不正を表します。
class ConfigurationError(Chip8Error, ValueError):
    pass

class ProgramTooLargeError(ConfigurationError):
    def __init__(self, length: int, capacity: int):
        self.length = length
        self.capacity = capacity
        super().__init__(f"Program image of {length} bytes exceeds the {capacity} bytes available above 0x200.")
