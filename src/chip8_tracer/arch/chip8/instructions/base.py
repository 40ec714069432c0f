# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。

命令形式タグ、オペコードのフィールド抽出、検証付きのメモリ・スタックアクセスを提供します。
"""
from enum import Enum
from typing import List, Sequence

from chip8_tracer.common.errors import MemoryBoundsError, StackBoundsError, KeypadIndexError
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState, MEMORY_SIZE, STACK_DEPTH, NUM_KEYS

INSTRUCTION_LENGTH = 2

# @intent:responsibility 命令形式のタグを定義します。デコード結果と実行テーブルを結ぶキーになります。
class Form(str, Enum):
    SYS = "SYS"
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_BYTE = "SE_BYTE"
    SNE_BYTE = "SNE_BYTE"
    SE_REG = "SE_REG"
    LD_BYTE = "LD_BYTE"
    ADD_BYTE = "ADD_BYTE"
    LD_REG = "LD_REG"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_REG = "ADD_REG"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_REG = "SNE_REG"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I = "ADD_I"
    LD_F = "LD_F"
    LD_B = "LD_B"
    LD_MEM_REGS = "LD_MEM_REGS"
    LD_REGS_MEM = "LD_REGS_MEM"
    UNKNOWN = "UNKNOWN"

# --- オペコードのフィールド抽出 ---
# @intent:utility_function オペコードの各ニブル/バイトを取り出します。
def x_of(opcode: int) -> int:
    return (opcode >> 8) & 0x0F

def y_of(opcode: int) -> int:
    return (opcode >> 4) & 0x0F

def n_of(opcode: int) -> int:
    return opcode & 0x000F

def kk_of(opcode: int) -> int:
    return opcode & 0x00FF

def nnn_of(opcode: int) -> int:
    return opcode & 0x0FFF

# --- オペランド表記 ---
def reg(index: int) -> str:
    return f"V{index:X}"

def byte(value: int) -> str:
    return f"#${value:02X}"

def addr(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function デコード結果のOperationを生成します。全ての命令は2バイト固定長です。
def make_operation(opcode: int, form: Form, mnemonic: str, operands: Sequence[str] = ()) -> Operation:
    return Operation(
        opcode_hex=f"{opcode:04X}",
        mnemonic=mnemonic,
        operands=list(operands),
        operand_bytes=[(opcode >> 8) & 0xFF, opcode & 0xFF],
        cycle_count=1,
        length=INSTRUCTION_LENGTH,
        opcode=opcode,
        form=form,
    )

# --- PC操作 ---
# @intent:utility_function 次の命令をスキップします。PCは既に現在の命令分だけ進められている前提です。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + INSTRUCTION_LENGTH) & 0xFFFF

# @intent:utility_function PCを現在の命令に巻き戻し、次のstep()で同じ命令を再実行させます。
def rewind(state: Chip8CpuState) -> None:
    state.pc = (state.pc - INSTRUCTION_LENGTH) & 0xFFFF

# --- 検証付きアクセス ---
# @intent:utility_function [address, address+count) がメモリ範囲内であることを検証します。
# @intent:rationale 複数バイトを書き込む命令が途中まで書いてから失敗することを防ぐため、アクセス前に範囲全体を検証します。
def check_range(address: int, count: int) -> None:
    if address < 0:
        raise MemoryBoundsError(address, MEMORY_SIZE)
    last = address + count - 1
    if count > 0 and last >= MEMORY_SIZE:
        raise MemoryBoundsError(last, MEMORY_SIZE)

def read_block(bus: Bus, address: int, count: int) -> List[int]:
    check_range(address, count)
    return [bus.read(address + offset) for offset in range(count)]

def write_block(bus: Bus, address: int, values: Sequence[int]) -> None:
    check_range(address, len(values))
    for offset, value in enumerate(values):
        bus.write(address + offset, value)

# @intent:utility_function 戻りアドレスをスタックへプッシュします。
def push(state: Chip8CpuState, value: int) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackBoundsError(f"Stack overflow: depth {state.sp} at capacity {STACK_DEPTH}.")
    state.stack[state.sp] = value & 0xFFFF
    state.sp += 1

# @intent:utility_function スタックから戻りアドレスをポップします。
def pop(state: Chip8CpuState) -> int:
    if state.sp <= 0:
        raise StackBoundsError("Stack underflow: return with empty stack.")
    state.sp -= 1
    return state.stack[state.sp]

# @intent:utility_function キー状態を読み出します。インデックスは0x0-0xFでなければなりません。
def key_pressed(state: Chip8CpuState, key: int) -> bool:
    if not 0 <= key < NUM_KEYS:
        raise KeypadIndexError(key)
    return state.keys[key]
