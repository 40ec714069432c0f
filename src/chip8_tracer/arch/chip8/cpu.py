# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import random
from typing import Dict, List, Optional

from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState, NUM_KEYS, NUM_REGISTERS
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.arch.chip8.instructions.base import check_range, INSTRUCTION_LENGTH
from chip8_tracer.transport.bus import Bus

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）と、
#                        表示/入力ブリッジ向けのスレッドセーフなAPIを提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    seedを指定するとRND命令の乱数列が再現可能になります。
    """
    def __init__(self, bus: Bus, seed: Optional[int] = None):
        self._seed = seed
        super().__init__(bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(rng=random.Random(self._seed))

    # @intent:responsibility PCと続くバイトからビッグエンディアンの16ビットオペコードをフェッチします。
    # @intent:pre-condition PC <= 0xFFE。満たさない場合はMemoryBoundsError。
    def _fetch(self) -> int:
        pc = self._state.pc
        check_range(pc, INSTRUCTION_LENGTH)
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus)

    # --- 入力ブリッジ向けAPI ---
    # @intent:responsibility 論理キー(0x0-0xF)の押下状態を設定します。
    def set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key {key} out of range (0x0-0xF).")
        with self._lock:
            self._state.keys[key] = pressed

    def press_key(self, key: int) -> None:
        self.set_key(key, True)

    def release_key(self, key: int) -> None:
        self.set_key(key, False)

    # --- 表示ブリッジ向けAPI ---
    # @intent:responsibility 再描画フラグが立っていれば表示バッファのコピーを返し、フラグをクリアします。
    # @intent:post-condition フラグが立っていなければNoneを返し、状態は変化しません。
    def export_display(self) -> Optional[bytes]:
        with self._lock:
            if not self._state.draw_flag:
                return None
            frame = bytes(self._state.display)
            self._state.draw_flag = False
            return frame

    # --- インスペクタ向けAPI ---
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(NUM_REGISTERS)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.dt, "ST": s.st})
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility VF（キャリー/衝突）、サウンド出力、再描画要求の状態を返します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "VF": s.vf != 0, "SOUND": s.st > 0, "DRAW": s.draw_flag
        }
