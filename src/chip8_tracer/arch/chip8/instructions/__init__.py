# src/chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Form
from .control import decode_unknown
from .maps import DECODE_TABLE, EXECUTE_MAP

# @intent:responsibility CHIP-8のオペコードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    16ビットのオペコードを優先順のパターンテーブルと照合し、
    形式タグ付きのOperationオブジェクトを返します。どれにも一致しなければUNKNOWNです。
    """
    for matches, decoder in DECODE_TABLE:
        if matches(opcode):
            return decoder(opcode)
    return decode_unknown(opcode)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus) -> None:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態を変更します。
    """
    executor = EXECUTE_MAP[operation.form]
    executor(state, bus, operation)


__all__ = ["Form", "decode_opcode", "execute_instruction"]
