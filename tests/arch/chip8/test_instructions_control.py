# tests/arch/chip8/test_instructions_control.py
"""
制御命令（ジャンプ、サブルーチン、スキップ、キー待ち）の単体テスト。
"""
import logging

import pytest
from chip8_tracer.common.errors import StackBoundsError, KeypadIndexError, BoundsError
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.state import STACK_DEPTH

# @intent:test_suite PCを変更する命令がCPU.stepを通して正しく振る舞うことを検証します。

@pytest.fixture
def cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return Chip8Cpu(bus)

def load(cpu, address, *opcodes):
    for offset, opcode in enumerate(opcodes):
        cpu.bus.load(address + offset * 2, opcode >> 8)
        cpu.bus.load(address + offset * 2 + 1, opcode & 0xFF)


class TestJumps:
    # @intent:test_case JP命令がPCを置き換えることを検証します。
    def test_jp(self, cpu):
        load(cpu, 0x200, 0x1ABC)
        cpu.step()
        assert cpu.get_state().pc == 0xABC

    def test_jp_v0(self, cpu):
        load(cpu, 0x200, 0xB300)
        cpu.get_state().v[0] = 0x10
        cpu.step()
        assert cpu.get_state().pc == 0x310

    # @intent:test_case JP V0でメモリ外へ飛んだ場合、次のフェッチで境界エラーになることを検証します。
    def test_jp_v0_past_memory_faults_on_next_fetch(self, cpu):
        load(cpu, 0x200, 0xBFFF)
        cpu.get_state().v[0] = 0xFF
        cpu.step()
        assert cpu.get_state().pc == 0x10FE
        with pytest.raises(BoundsError):
            cpu.step()

    def test_sys_is_ignored(self, cpu):
        load(cpu, 0x200, 0x0300)
        cpu.step()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().sp == 0


class TestSubroutines:
    # @intent:test_case CALLとRETの往復でCALLの次の命令に戻ることを検証します。
    def test_call_ret_round_trip(self, cpu):
        load(cpu, 0x200, 0x2300)
        load(cpu, 0x300, 0x00EE)
        cpu.step()
        state = cpu.get_state()
        assert state.pc == 0x300
        assert state.sp == 1
        assert state.stack[0] == 0x200
        cpu.step()
        assert state.pc == 0x202
        assert state.sp == 0

    def test_nested_calls(self, cpu):
        load(cpu, 0x200, 0x2300)
        load(cpu, 0x300, 0x2400, 0x00EE)
        load(cpu, 0x400, 0x00EE)
        for _ in range(4):
            cpu.step()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().sp == 0

    # @intent:test_case 空のスタックでRETするとStackBoundsErrorになることを検証します。
    def test_ret_with_empty_stack(self, cpu):
        load(cpu, 0x200, 0x00EE)
        with pytest.raises(StackBoundsError, match="underflow"):
            cpu.step()
        # 失敗した命令の先頭を指したまま停止する
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().sp == 0

    # @intent:test_case 17段目のCALLがStackBoundsErrorになることを検証します。
    def test_call_overflow(self, cpu):
        # 0x200: CALL 0x200 (自分自身を呼び続ける)
        load(cpu, 0x200, 0x2200)
        for _ in range(STACK_DEPTH):
            cpu.step()
        assert cpu.get_state().sp == STACK_DEPTH
        with pytest.raises(StackBoundsError, match="overflow"):
            cpu.step()
        assert cpu.get_state().sp == STACK_DEPTH


class TestSkips:
    @pytest.mark.parametrize("opcode, v1, v2, skipped", [
        (0x3142, 0x42, 0, True),
        (0x3142, 0x41, 0, False),
        (0x4142, 0x41, 0, True),
        (0x4142, 0x42, 0, False),
        (0x5120, 0x07, 0x07, True),
        (0x5120, 0x07, 0x08, False),
        (0x9120, 0x07, 0x08, True),
        (0x9120, 0x07, 0x07, False),
    ])
    # @intent:test_case 条件成立時のみPCがさらに2進むことを検証します。
    def test_conditional_skip(self, cpu, opcode, v1, v2, skipped):
        load(cpu, 0x200, opcode)
        cpu.get_state().v[1] = v1
        cpu.get_state().v[2] = v2
        cpu.step()
        assert cpu.get_state().pc == (0x204 if skipped else 0x202)

    def test_skp_and_sknp(self, cpu):
        load(cpu, 0x200, 0xE19E)
        cpu.get_state().v[1] = 0xA
        cpu.press_key(0xA)
        cpu.step()
        assert cpu.get_state().pc == 0x204

        load(cpu, 0x204, 0xE1A1)
        cpu.step()
        assert cpu.get_state().pc == 0x206

        cpu.release_key(0xA)
        load(cpu, 0x206, 0xE1A1)
        cpu.step()
        assert cpu.get_state().pc == 0x20A

    # @intent:test_case 16以上のキー番号を参照するとKeypadIndexErrorになることを検証します。
    def test_skp_with_key_out_of_range(self, cpu):
        load(cpu, 0x200, 0xE19E)
        cpu.get_state().v[1] = 0x10
        with pytest.raises(KeypadIndexError):
            cpu.step()


class TestWaitForKey:
    # @intent:test_case キーが押されていなければ同じ命令に留まり、押されたら最小番号のキーを格納することを検証します。
    def test_waits_until_key_pressed(self, cpu):
        load(cpu, 0x200, 0xF30A)
        for _ in range(3):
            cpu.step()
            assert cpu.get_state().pc == 0x200
        cpu.press_key(0xC)
        cpu.press_key(0x5)
        cpu.step()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().v[3] == 0x5


class TestUnknown:
    # @intent:test_case 未知のオペコードは警告を出して2バイト進むだけであることを検証します。
    def test_unknown_is_logged_and_skipped(self, cpu, caplog):
        load(cpu, 0x200, 0xFFFF)
        before = list(cpu.get_state().v)
        with caplog.at_level(logging.WARNING):
            snapshot = cpu.step()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().v == before
        assert snapshot.operation.mnemonic == "UNKNOWN"
        assert "Unknown opcode 0xffff at PC 0x200" in caplog.text
