# src/chip8_tracer/arch/chip8/instructions/display.py
"""
表示命令（画面消去、スプライト描画）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import (
    Chip8CpuState, DISPLAY_WIDTH, DISPLAY_HEIGHT, PIXEL_OFF, PIXEL_ON,
)
from .base import Form, make_operation, x_of, y_of, n_of, reg, read_block

SPRITE_WIDTH = 8

# --- CLS ---
def decode_cls(opcode: int) -> Operation:
    return make_operation(opcode, Form.CLS, "CLS")

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.display[:] = bytes(len(state.display))
    state.draw_flag = True

# --- DRW Vx, Vy, nibble ---
def decode_drw(opcode: int) -> Operation:
    return make_operation(opcode, Form.DRW, "DRW", [reg(x_of(opcode)), reg(y_of(opcode)), str(n_of(opcode))])

# @intent:responsibility I以降のNバイトのスプライトを(Vx, Vy)にXOR合成します。
# @intent:post-condition 点灯していた画素を消した場合のみVF=1、それ以外はVF=0。座標は画面端で折り返します。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    sprite = read_block(bus, state.i, n_of(op.opcode))

    # VFを先にクリアするため、x,yにVFを指定した場合の座標は0になる
    state.vf = 0
    origin_x = state.v[x_of(op.opcode)]
    origin_y = state.v[y_of(op.opcode)]
    for row, sprite_byte in enumerate(sprite):
        screen_row = (origin_y + row) % DISPLAY_HEIGHT
        for col in range(SPRITE_WIDTH):
            if not sprite_byte & (0x80 >> col):
                continue
            screen_col = (origin_x + col) % DISPLAY_WIDTH
            index = screen_row * DISPLAY_WIDTH + screen_col
            if state.display[index] != PIXEL_OFF:
                state.display[index] = PIXEL_OFF
                state.vf = 1
            else:
                state.display[index] = PIXEL_ON
    state.draw_flag = True
