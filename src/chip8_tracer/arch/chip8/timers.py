# src/chip8_tracer/arch/chip8/timers.py
"""
遅延タイマー(DT)とサウンドタイマー(ST)のカウントダウン処理。

命令実行とは独立した固定レート（通常60Hz）でtick()が呼ばれることを想定しています。
"""
from chip8_tracer.arch.chip8.cpu import Chip8Cpu

DEFAULT_TIMER_HZ = 60

# @intent:responsibility 2つのカウントダウンタイマーを1ずつ減算します。0未満にはなりません。
class TimerProcess:
    def __init__(self, cpu: Chip8Cpu):
        self._cpu = cpu
        self._ticks = 0

    # @intent:responsibility DT, STをそれぞれ0より大きければ1減らします。
    # @intent:rationale step()と同じロックの下で実行し、途中状態が観測されないようにします。
    def tick(self) -> None:
        with self._cpu.lock:
            state = self._cpu.get_state()
            if state.dt > 0:
                state.dt -= 1
            if state.st > 0:
                state.st -= 1
            self._ticks += 1

    @property
    def ticks(self) -> int:
        return self._ticks

    # @intent:responsibility 外部の音声出力側がブザーを鳴らすべきかを返します。
    @property
    def sound_active(self) -> bool:
        return self._cpu.get_state().st > 0
