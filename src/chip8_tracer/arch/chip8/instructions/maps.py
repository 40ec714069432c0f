"""
オペコードと命令実装のマッピング定義。

CHIP-8のオペコードは上位ニブルで大分類され、下位のニブル/バイトで細分されます。
範囲が重なるため、DECODE_TABLEは優先順に並べ、最初に一致したエントリを採用します。
"""
from typing import Callable, List, Tuple

from chip8_tracer.core.snapshot import Operation
from . import alu
from . import control
from . import display
from . import load
from .base import Form, y_of

Matcher = Callable[[int], bool]
Decoder = Callable[[int], Operation]

# @intent:utility_function (opcode & mask) == value で一致判定する関数を生成します。
def masked(mask: int, value: int) -> Matcher:
    def match(opcode: int) -> bool:
        return (opcode & mask) == value
    return match

# @intent:utility_function SYS命令の判定。0x0NNNのうち、y=0xEの形（CLS/RET系）は除外します。
def is_sys(opcode: int) -> bool:
    return opcode < 0x1000 and y_of(opcode) != 0xE

# @intent:map 優先順のデコードテーブル。(判定関数, デコード関数) のリスト。
DECODE_TABLE: List[Tuple[Matcher, Decoder]] = [
    (is_sys, control.decode_sys),
    (masked(0xFFFF, 0x00E0), display.decode_cls),
    (masked(0xFFFF, 0x00EE), control.decode_ret),
    (masked(0xF000, 0x1000), control.decode_jp),
    (masked(0xF000, 0x2000), control.decode_call),
    (masked(0xF000, 0x3000), control.decode_se_byte),
    (masked(0xF000, 0x4000), control.decode_sne_byte),
    (masked(0xF00F, 0x5000), control.decode_se_reg),
    (masked(0xF000, 0x6000), load.decode_ld_byte),
    (masked(0xF000, 0x7000), alu.decode_add_byte),
    (masked(0xF00F, 0x8000), load.decode_ld_reg),
    (masked(0xF00F, 0x8001), alu.decode_or),
    (masked(0xF00F, 0x8002), alu.decode_and),
    (masked(0xF00F, 0x8003), alu.decode_xor),
    (masked(0xF00F, 0x8004), alu.decode_add_reg),
    (masked(0xF00F, 0x8005), alu.decode_sub),
    (masked(0xF00F, 0x8006), alu.decode_shr),
    (masked(0xF00F, 0x8007), alu.decode_subn),
    (masked(0xF00F, 0x800E), alu.decode_shl),
    (masked(0xF00F, 0x9000), control.decode_sne_reg),
    (masked(0xF000, 0xA000), load.decode_ld_i),
    (masked(0xF000, 0xB000), control.decode_jp_v0),
    (masked(0xF000, 0xC000), alu.decode_rnd),
    (masked(0xF000, 0xD000), display.decode_drw),
    (masked(0xF0FF, 0xE09E), control.decode_skp),
    (masked(0xF0FF, 0xE0A1), control.decode_sknp),
    (masked(0xF0FF, 0xF007), load.decode_ld_vx_dt),
    (masked(0xF0FF, 0xF00A), control.decode_ld_vx_k),
    (masked(0xF0FF, 0xF015), load.decode_ld_dt_vx),
    (masked(0xF0FF, 0xF018), load.decode_ld_st_vx),
    (masked(0xF0FF, 0xF01E), alu.decode_add_i),
    (masked(0xF0FF, 0xF029), load.decode_ld_f),
    (masked(0xF0FF, 0xF033), load.decode_ld_b),
    (masked(0xF0FF, 0xF055), load.decode_ld_mem_regs),
    (masked(0xF0FF, 0xF065), load.decode_ld_regs_mem),
]

# @intent:map 命令形式から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    Form.SYS: control.execute_sys,
    Form.RET: control.execute_ret,
    Form.JP: control.execute_jp,
    Form.CALL: control.execute_call,
    Form.SE_BYTE: control.execute_se_byte,
    Form.SNE_BYTE: control.execute_sne_byte,
    Form.SE_REG: control.execute_se_reg,
    Form.SNE_REG: control.execute_sne_reg,
    Form.JP_V0: control.execute_jp_v0,
    Form.SKP: control.execute_skp,
    Form.SKNP: control.execute_sknp,
    Form.LD_VX_K: control.execute_ld_vx_k,
    Form.UNKNOWN: control.execute_unknown,

    # Load/Store
    Form.LD_BYTE: load.execute_ld_byte,
    Form.LD_REG: load.execute_ld_reg,
    Form.LD_I: load.execute_ld_i,
    Form.LD_VX_DT: load.execute_ld_vx_dt,
    Form.LD_DT_VX: load.execute_ld_dt_vx,
    Form.LD_ST_VX: load.execute_ld_st_vx,
    Form.LD_F: load.execute_ld_f,
    Form.LD_B: load.execute_ld_b,
    Form.LD_MEM_REGS: load.execute_ld_mem_regs,
    Form.LD_REGS_MEM: load.execute_ld_regs_mem,

    # ALU
    Form.ADD_BYTE: alu.execute_add_byte,
    Form.OR: alu.execute_or,
    Form.AND: alu.execute_and,
    Form.XOR: alu.execute_xor,
    Form.ADD_REG: alu.execute_add_reg,
    Form.SUB: alu.execute_sub,
    Form.SUBN: alu.execute_subn,
    Form.SHR: alu.execute_shr,
    Form.SHL: alu.execute_shl,
    Form.ADD_I: alu.execute_add_i,
    Form.RND: alu.execute_rnd,

    # Display
    Form.CLS: display.execute_cls,
    Form.DRW: display.execute_drw,
}
