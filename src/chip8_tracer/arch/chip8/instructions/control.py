# src/chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー待ち）の実装。

PCはCPU.stepで実行前に命令長(2)だけ進められています。
"""
import logging

from chip8_tracer.common.errors import DecodeError
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import (
    Form, make_operation, x_of, y_of, kk_of, nnn_of, reg, byte, addr,
    skip_next, rewind, push, pop, key_pressed, INSTRUCTION_LENGTH,
)

logger = logging.getLogger(__name__)

# --- SYS ---
# @intent:responsibility SYS addr (0NNN) 命令をデコードします。
def decode_sys(opcode: int) -> Operation:
    return make_operation(opcode, Form.SYS, "SYS", [addr(nnn_of(opcode))])

# @intent:responsibility SYS命令は機械語ルーチン呼び出しであり、インタプリタでは無視します。
def execute_sys(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    logger.debug("Machine code jump to %s ignored", addr(nnn_of(op.opcode)))

# --- RET ---
def decode_ret(opcode: int) -> Operation:
    return make_operation(opcode, Form.RET, "RET")

# @intent:responsibility RET命令を実行します。スタックにはCALL命令自身のアドレスが積まれているため、+2して復帰します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = (pop(state) + INSTRUCTION_LENGTH) & 0xFFFF

# --- JP ---
def decode_jp(opcode: int) -> Operation:
    return make_operation(opcode, Form.JP, "JP", [addr(nnn_of(opcode))])

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = nnn_of(op.opcode)

# --- CALL ---
def decode_call(opcode: int) -> Operation:
    return make_operation(opcode, Form.CALL, "CALL", [addr(nnn_of(opcode))])

# @intent:responsibility CALL命令を実行し、CALL命令自身のアドレスをプッシュしてからジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    # state.pc is already past the CALL
    push(state, state.pc - INSTRUCTION_LENGTH)
    state.pc = nnn_of(op.opcode)

# --- JP V0, addr ---
def decode_jp_v0(opcode: int) -> Operation:
    return make_operation(opcode, Form.JP_V0, "JP", ["V0", addr(nnn_of(opcode))])

def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = (state.v[0] + nnn_of(op.opcode)) & 0xFFFF

# --- SE / SNE ---
def decode_se_byte(opcode: int) -> Operation:
    return make_operation(opcode, Form.SE_BYTE, "SE", [reg(x_of(opcode)), byte(kk_of(opcode))])

def execute_se_byte(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[x_of(op.opcode)] == kk_of(op.opcode):
        skip_next(state)

def decode_sne_byte(opcode: int) -> Operation:
    return make_operation(opcode, Form.SNE_BYTE, "SNE", [reg(x_of(opcode)), byte(kk_of(opcode))])

def execute_sne_byte(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[x_of(op.opcode)] != kk_of(op.opcode):
        skip_next(state)

def decode_se_reg(opcode: int) -> Operation:
    return make_operation(opcode, Form.SE_REG, "SE", [reg(x_of(opcode)), reg(y_of(opcode))])

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[x_of(op.opcode)] == state.v[y_of(op.opcode)]:
        skip_next(state)

def decode_sne_reg(opcode: int) -> Operation:
    return make_operation(opcode, Form.SNE_REG, "SNE", [reg(x_of(opcode)), reg(y_of(opcode))])

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[x_of(op.opcode)] != state.v[y_of(op.opcode)]:
        skip_next(state)

# --- SKP / SKNP ---
def decode_skp(opcode: int) -> Operation:
    return make_operation(opcode, Form.SKP, "SKP", [reg(x_of(opcode))])

def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if key_pressed(state, state.v[x_of(op.opcode)]):
        skip_next(state)

def decode_sknp(opcode: int) -> Operation:
    return make_operation(opcode, Form.SKNP, "SKNP", [reg(x_of(opcode))])

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if not key_pressed(state, state.v[x_of(op.opcode)]):
        skip_next(state)

# --- LD Vx, K ---
def decode_ld_vx_k(opcode: int) -> Operation:
    return make_operation(opcode, Form.LD_VX_K, "LD", [reg(x_of(opcode)), "K"])

# @intent:responsibility キー入力待ち命令を実行します。
# @intent:rationale スレッドをブロックせず、キーが押されていなければPCを巻き戻して次のstep()で再実行させます。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    for index, pressed in enumerate(state.keys):
        if pressed:
            state.v[x_of(op.opcode)] = index
            return
    rewind(state)

# --- UNKNOWN ---
def decode_unknown(opcode: int) -> Operation:
    return make_operation(opcode, Form.UNKNOWN, "UNKNOWN", [f"${opcode:04X}"])

# @intent:responsibility 未知のオペコードを報告し、2バイトのNOPとして扱います。
def execute_unknown(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    error = DecodeError(op.opcode, (state.pc - INSTRUCTION_LENGTH) & 0xFFFF)
    logger.warning("%s; skipped", error)
