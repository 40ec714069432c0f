# src/chip8_tracer/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、インデックス、タイマー、メモリ間のロード/ストア）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.loader.font import GLYPH_HEIGHT
from .base import (
    Form, make_operation, x_of, y_of, kk_of, nnn_of, reg, byte, addr,
    read_block, write_block,
)

# --- LD Vx, byte ---
def decode_ld_byte(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_BYTE, "LD", [reg(x_of(opcode)), byte(kk_of(opcode))])

def execute_ld_byte(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] = kk_of(op.opcode)

# --- LD Vx, Vy ---
def decode_ld_reg(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_REG, "LD", [reg(x_of(opcode)), reg(y_of(opcode))])

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] = state.v[y_of(op.opcode)]

# --- LD I, addr ---
def decode_ld_i(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_I, "LD", ["I", addr(nnn_of(opcode))])

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = nnn_of(op.opcode)

# --- Timers ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_VX_DT, "LD", [reg(x_of(opcode)), "DT"])

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[x_of(op.opcode)] = state.dt

def decode_ld_dt_vx(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_DT_VX, "LD", ["DT", reg(x_of(opcode))])

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.dt = state.v[x_of(op.opcode)]

def decode_ld_st_vx(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_ST_VX, "LD", ["ST", reg(x_of(opcode))])

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.st = state.v[x_of(op.opcode)]

# --- LD F, Vx ---
def decode_ld_f(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_F, "LD", ["F", reg(x_of(opcode))])

# @intent:responsibility Vxの値に対応するフォントグリフの先頭アドレスをIに設定します。
def execute_ld_f(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = (state.v[x_of(op.opcode)] * GLYPH_HEIGHT) & 0xFFFF

# --- LD B, Vx ---
def decode_ld_b(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_B, "LD", ["B", reg(x_of(opcode))])

# @intent:responsibility VxのBCD表現（百の位、十の位、一の位）をI, I+1, I+2に書き込みます。
def execute_ld_b(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    value = state.v[x_of(op.opcode)]
    write_block(bus, state.i, [value // 100, (value // 10) % 10, value % 10])

# --- LD [I], Vx ---
def decode_ld_mem_regs(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_MEM_REGS, "LD", ["[I]", reg(x_of(opcode))])

# @intent:responsibility V0からVxまで（両端を含む）をI以降のメモリへ書き込みます。Iは変化しません。
def execute_ld_mem_regs(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    write_block(bus, state.i, state.v[:x + 1])

# --- LD Vx, [I] ---
def decode_ld_regs_mem(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_REGS_MEM, "LD", [reg(x_of(opcode)), "[I]"])

def execute_ld_regs_mem(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    x = x_of(op.opcode)
    state.v[:x + 1] = read_block(bus, state.i, x + 1)
