# src/chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
import random
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState

# @intent:constant CHIP-8のメモリ・画面・スタックの寸法を定義します。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
FONT_START = 0x000
NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_DEPTH = 16
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

FLAG_REGISTER = 0xF

PIXEL_OFF = 0x00
PIXEL_ON = 0xFF

# @intent:responsibility CHIP-8の全ての可変状態（レジスタ、タイマー、スタック、表示バッファ、キー状態、再描画フラグ）を保持します。
# @intent:rationale メモリ本体はBus上のRAMデバイスが保持し、ここには含めません。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    i: int = 0x0000    # Index Register
    dt: int = 0x00     # Delay Timer
    st: int = 0x00     # Sound Timer
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    display: bytearray = field(default_factory=lambda: bytearray(DISPLAY_WIDTH * DISPLAY_HEIGHT))
    keys: List[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    draw_flag: bool = False
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    # @intent:accessor フラグレジスタ(VF)へのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    def pixel(self, x: int, y: int) -> bool:
        return self.display[y * DISPLAY_WIDTH + x] != PIXEL_OFF

    def lit_pixel_count(self) -> int:
        return sum(1 for p in self.display if p != PIXEL_OFF)
