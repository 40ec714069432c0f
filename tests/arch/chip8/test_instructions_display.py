# tests/arch/chip8/test_instructions_display.py
"""
表示命令（CLS, DRW）と表示ブリッジの単体テスト。
"""
import pytest
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.state import DISPLAY_WIDTH, DISPLAY_HEIGHT, PIXEL_ON
from chip8_tracer.common.errors import MemoryBoundsError

# @intent:test_suite スプライトのXOR合成、衝突検出、折り返し、再描画通知を検証します。

SPRITE_ADDR = 0x300

@pytest.fixture
def cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    cpu = Chip8Cpu(bus)
    for offset, value in enumerate([0xFF, 0x81, 0xFF]):
        bus.load(SPRITE_ADDR + offset, value)
    cpu.get_state().i = SPRITE_ADDR
    return cpu

def run(cpu, opcode):
    state = cpu.get_state()
    cpu.bus.load(state.pc, opcode >> 8)
    cpu.bus.load(state.pc + 1, opcode & 0xFF)
    return cpu.step()


class TestDraw:
    # @intent:test_case スプライトの描画でビットの立った画素のみが点灯することを検証します。
    def test_draw_sets_pixels(self, cpu):
        state = cpu.get_state()
        state.v[0], state.v[1] = 10, 5
        run(cpu, 0xD013)
        assert state.vf == 0
        assert state.lit_pixel_count() == 8 + 2 + 8
        assert state.pixel(10, 5) and state.pixel(17, 5)
        assert state.pixel(10, 6) and not state.pixel(11, 6) and state.pixel(17, 6)
        assert state.display[5 * DISPLAY_WIDTH + 10] == PIXEL_ON

    # @intent:test_case 同じスプライトを2回描くと画面が元に戻り、2回目はVF=1になることを検証します。
    def test_draw_twice_erases_and_reports_collision(self, cpu):
        state = cpu.get_state()
        state.v[0], state.v[1] = 20, 10
        run(cpu, 0xD013)
        assert state.vf == 0
        run(cpu, 0xD013)
        assert state.vf == 1
        assert state.lit_pixel_count() == 0

    def test_partial_overlap_collision(self, cpu):
        state = cpu.get_state()
        run(cpu, 0xD011)
        state.v[0] = 4
        run(cpu, 0xD011)
        assert state.vf == 1
        # 0-3と8-11が点灯、4-7は消灯
        assert [state.pixel(col, 0) for col in range(12)] == [True] * 4 + [False] * 4 + [True] * 4

    # @intent:test_case x=60からの描画が画面左端へ折り返すことを検証します。
    def test_draw_wraps_horizontally(self, cpu):
        state = cpu.get_state()
        state.v[0], state.v[1] = 60, 0
        run(cpu, 0xD011)
        assert [state.pixel(col, 0) for col in (60, 61, 62, 63, 0, 1, 2, 3)] == [True] * 8
        assert not state.pixel(4, 0)

    def test_draw_wraps_vertically(self, cpu):
        state = cpu.get_state()
        state.v[0], state.v[1] = 0, DISPLAY_HEIGHT - 1
        run(cpu, 0xD013)
        assert state.pixel(0, DISPLAY_HEIGHT - 1)
        assert state.pixel(0, 0) and not state.pixel(1, 0)
        assert state.pixel(1, 1)

    # @intent:test_case VFはスプライト描画前に0クリアされるため、VFを座標に指定すると0として扱われることを検証します。
    def test_vf_coordinate_is_cleared_before_drawing(self, cpu):
        state = cpu.get_state()
        state.v[0] = 3
        state.vf = 7
        run(cpu, 0xD0F1)
        assert state.pixel(3, 0)
        assert not state.pixel(3, 7)
        assert state.vf == 0

        run(cpu, 0x00E0)
        state.v[0] = 0
        state.vf = 10
        # DRW VF, V0, 1
        run(cpu, 0xDF01)
        assert state.pixel(0, 0)
        assert not state.pixel(10, 0)

    def test_out_of_range_sprite_keeps_vf(self, cpu):
        state = cpu.get_state()
        state.i = 0xFFE
        state.vf = 5
        with pytest.raises(MemoryBoundsError):
            run(cpu, 0xD013)
        assert state.vf == 5
        assert state.pc == 0x200


class TestClearAndExport:
    # @intent:test_case CLSで全画素が消え、export_displayがちょうど1回だけフレームを返すことを検証します。
    def test_cls_notifies_once(self, cpu):
        state = cpu.get_state()
        run(cpu, 0xD013)
        cpu.export_display()
        run(cpu, 0x00E0)
        assert state.lit_pixel_count() == 0
        frame = cpu.export_display()
        assert frame == bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)
        assert cpu.export_display() is None

    def test_export_returns_copy(self, cpu):
        run(cpu, 0xD013)
        frame = cpu.export_display()
        assert isinstance(frame, bytes)
        run(cpu, 0xD013)
        assert frame.count(PIXEL_ON) == 18
        assert cpu.get_state().lit_pixel_count() == 0

    def test_no_export_before_drawing(self, cpu):
        assert cpu.export_display() is None
