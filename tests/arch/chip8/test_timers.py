# tests/arch/chip8/test_timers.py
"""
遅延/サウンドタイマーのカウントダウン処理の単体テスト。
"""
import pytest
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8 import Chip8Cpu, TimerProcess

@pytest.fixture
def cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return Chip8Cpu(bus)

class TestTimerProcess:
    # @intent:test_case tick()ごとにDTとSTが1ずつ減り、0で止まることを検証します。
    def test_tick_decrements_to_zero(self, cpu):
        timers = TimerProcess(cpu)
        state = cpu.get_state()
        state.dt = 2
        state.st = 1
        timers.tick()
        assert (state.dt, state.st) == (1, 0)
        timers.tick()
        timers.tick()
        assert (state.dt, state.st) == (0, 0)
        assert timers.ticks == 3

    # @intent:test_case DT=nのときn回のtick()でちょうど0になることを検証します。
    @pytest.mark.parametrize("n", [1, 60, 255])
    def test_delay_reaches_zero_after_n_ticks(self, cpu, n):
        timers = TimerProcess(cpu)
        cpu.get_state().dt = n
        for _ in range(n - 1):
            timers.tick()
        assert cpu.get_state().dt == 1
        timers.tick()
        assert cpu.get_state().dt == 0

    def test_sound_active(self, cpu):
        timers = TimerProcess(cpu)
        assert timers.sound_active is False
        cpu.get_state().st = 1
        assert timers.sound_active is True
        timers.tick()
        assert timers.sound_active is False

    # @intent:test_case タイマーの減算がstep()の実行に依存しないことを検証します。
    def test_ticks_independent_of_steps(self, cpu):
        timers = TimerProcess(cpu)
        cpu.get_state().dt = 5
        for _ in range(5):
            timers.tick()
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().dt == 0
