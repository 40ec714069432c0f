# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

全てのレジスタ演算は256を法とし、例外にはなりません。
VFを書き換える命令では、結果を書いた後にフラグを書くため、Vx=VFの場合はフラグが残ります。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import Form, make_operation, x_of, y_of, kk_of, reg, byte

# @intent:utility_function 演算結果をVxに格納し、続けてフラグをVFに格納します。
def store_with_flag(state: Chip8CpuState, x: int, result: int, flag: bool) -> None:
    state.v[x] = result & 0xFF
    state.vf = 1 if flag else 0

# --- ADD Vx, byte ---
def decode_add_byte(opcode: int) -> Operation:
    return make_operation(opcode, Form.ADD_BYTE, "ADD", [reg(x_of(opcode)), byte(kk_of(opcode))])

# @intent:responsibility 即値加算。キャリーフラグは変化しません。
def execute_add_byte(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    state.v[x] = (state.v[x] + kk_of(op.opcode)) & 0xFF

# --- OR / AND / XOR ---
def decode_or(opcode: int) -> Operation:
    return make_operation(opcode, Form.OR, "OR", [reg(x_of(opcode)), reg(y_of(opcode))])

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] |= state.v[y_of(op.opcode)]

def decode_and(opcode: int) -> Operation:
    return make_operation(opcode, Form.AND, "AND", [reg(x_of(opcode)), reg(y_of(opcode))])

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] &= state.v[y_of(op.opcode)]

def decode_xor(opcode: int) -> Operation:
    return make_operation(opcode, Form.XOR, "XOR", [reg(x_of(opcode)), reg(y_of(opcode))])

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] ^= state.v[y_of(op.opcode)]

# --- ADD Vx, Vy ---
def decode_add_reg(opcode: int) -> Operation:
    return make_operation(opcode, Form.ADD_REG, "ADD", [reg(x_of(opcode)), reg(y_of(opcode))])

# @intent:responsibility レジスタ加算。真の和が256以上ならVF=1。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    total = state.v[x] + state.v[y_of(op.opcode)]
    store_with_flag(state, x, total, total > 0xFF)

# --- SUB Vx, Vy ---
def decode_sub(opcode: int) -> Operation:
    return make_operation(opcode, Form.SUB, "SUB", [reg(x_of(opcode)), reg(y_of(opcode))])

# @intent:responsibility Vx = Vx - Vy。ボローが発生しなければVF=1、発生すればVF=0。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    v1, v2 = state.v[x], state.v[y_of(op.opcode)]
    store_with_flag(state, x, v1 - v2, v1 >= v2)

# --- SUBN Vx, Vy ---
def decode_subn(opcode: int) -> Operation:
    return make_operation(opcode, Form.SUBN, "SUBN", [reg(x_of(opcode)), reg(y_of(opcode))])

# @intent:responsibility Vx = Vy - Vx。ボローが発生しなければVF=1、発生すればVF=0。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    v1, v2 = state.v[x], state.v[y_of(op.opcode)]
    store_with_flag(state, x, v2 - v1, v2 >= v1)

# --- SHR / SHL ---
def decode_shr(opcode: int) -> Operation:
    return make_operation(opcode, Form.SHR, "SHR", [reg(x_of(opcode))])

# @intent:responsibility 右シフト。シフト前の最下位ビットをVFに格納します。Vyは使用しません。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    value = state.v[x]
    store_with_flag(state, x, value >> 1, value & 0x01)

def decode_shl(opcode: int) -> Operation:
    return make_operation(opcode, Form.SHL, "SHL", [reg(x_of(opcode))])

# @intent:responsibility 左シフト。シフト前の最上位ビットをVFに格納します。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    value = state.v[x]
    store_with_flag(state, x, value << 1, value & 0x80)

# --- ADD I, Vx ---
def decode_add_i(opcode: int) -> Operation:
    return make_operation(opcode, Form.ADD_I, "ADD", ["I", reg(x_of(opcode))])

# @intent:responsibility I += Vx（16ビット）。VFは変化しません。
def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = (state.i + state.v[x_of(op.opcode)]) & 0xFFFF

# --- RND Vx, byte ---
def decode_rnd(opcode: int) -> Operation:
    return make_operation(opcode, Form.RND, "RND", [reg(x_of(opcode)), byte(kk_of(opcode))])

# @intent:responsibility 一様乱数バイトとkkの論理積をVxに格納します。乱数源は状態に保持されたRandomです。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] = state.rng.randrange(256) & kk_of(op.opcode)
