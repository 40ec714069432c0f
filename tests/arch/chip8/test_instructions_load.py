# tests/arch/chip8/test_instructions_load.py
"""
転送命令（レジスタ、I、タイマー、メモリ）の単体テスト。
"""
import pytest
from chip8_tracer.common.errors import MemoryBoundsError
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_tracer.loader.font import FONT_SET, GLYPH_HEIGHT

# @intent:test_suite 転送命令が状態とメモリを正しく更新し、境界外アクセスを事前に拒否することを検証します。

@pytest.fixture
def bus():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return bus

@pytest.fixture
def state():
    return Chip8CpuState()

def execute(state, bus, opcode):
    execute_instruction(decode_opcode(opcode), state, bus)


class TestRegisterLoads:
    # @intent:test_case 全てのxについて6XKKがVxのみを書き換えることを検証します。
    @pytest.mark.parametrize("x", range(16))
    def test_ld_byte_all_registers(self, state, bus, x):
        execute(state, bus, 0x6000 | (x << 8) | 0x42)
        assert state.v[x] == 0x42
        assert [v for k, v in enumerate(state.v) if k != x] == [0] * 15

    def test_ld_reg(self, state, bus):
        state.v[0xA] = 0x42
        execute(state, bus, 0x8BA0)
        assert state.v[0xB] == 0x42
        assert state.v[0xA] == 0x42

    def test_ld_i(self, state, bus):
        execute(state, bus, 0xA123)
        assert state.i == 0x123

    # @intent:test_case タイマーとレジスタ間の転送を検証します。
    def test_timer_transfers(self, state, bus):
        state.v[4] = 0x3C
        execute(state, bus, 0xF415)
        execute(state, bus, 0xF418)
        assert state.dt == 0x3C
        assert state.st == 0x3C
        state.dt = 0x10
        execute(state, bus, 0xF507)
        assert state.v[5] == 0x10

    # @intent:test_case Fx29がVxに対応するグリフの先頭アドレス（Vx*5）をIに設定することを検証します。
    def test_ld_f(self, state, bus):
        for digit in range(16):
            state.v[2] = digit
            execute(state, bus, 0xF229)
            assert state.i == digit * GLYPH_HEIGHT
        state.v[2] = 0xFF
        execute(state, bus, 0xF229)
        assert state.i == 0xFF * 5


class TestBcd:
    # @intent:test_case 234のBCD表現が1000番地から書き込まれることを検証します。
    def test_ld_b_writes_digits(self, state, bus):
        state.v[1] = 234
        state.i = 1000
        execute(state, bus, 0xF133)
        assert [bus.peek(1000), bus.peek(1001), bus.peek(1002)] == [2, 3, 4]
        assert state.i == 1000

    @pytest.mark.parametrize("value, digits", [(0, [0, 0, 0]), (7, [0, 0, 7]), (90, [0, 9, 0]), (255, [2, 5, 5])])
    def test_ld_b_values(self, state, bus, value, digits):
        state.v[0] = value
        state.i = 0x300
        execute(state, bus, 0xF033)
        assert [bus.peek(0x300 + k) for k in range(3)] == digits

    # @intent:test_case 書き込み範囲の一部でも範囲外なら、何も書き込まずに境界エラーになることを検証します。
    def test_ld_b_out_of_bounds_writes_nothing(self, state, bus):
        state.v[1] = 123
        state.i = 0xFFE
        with pytest.raises(MemoryBoundsError):
            execute(state, bus, 0xF133)
        assert bus.peek(0xFFE) == 0
        assert bus.peek(0xFFF) == 0


class TestRegisterDumpLoad:
    # @intent:test_case 全てのxについてV0..Vxの退避と復帰が一致し、Iが変化しないことを検証します。
    def test_dump_then_load_restores_registers(self, state, bus):
        for x in range(16):
            original = [(index * 17 + x) & 0xFF for index in range(16)]
            state.v = list(original)
            state.i = 0x400
            execute(state, bus, 0xF055 | (x << 8))
            assert state.i == 0x400
            state.v = [0] * 16
            execute(state, bus, 0xF065 | (x << 8))
            assert state.i == 0x400
            assert state.v[:x + 1] == original[:x + 1]
            assert state.v[x + 1:] == [0] * (15 - x)

    def test_dump_writes_only_through_x(self, state, bus):
        state.v = list(range(1, 17))
        state.i = 0x500
        execute(state, bus, 0xF255)
        assert [bus.peek(0x500 + k) for k in range(4)] == [1, 2, 3, 0]

    def test_load_out_of_bounds(self, state, bus):
        state.i = 0xFFA
        with pytest.raises(MemoryBoundsError):
            execute(state, bus, 0xFF65)

    def test_load_reads_font(self, state, bus):
        for offset, value in enumerate(FONT_SET):
            bus.load(offset, value)
        state.i = 0
        execute(state, bus, 0xF465)
        assert state.v[:5] == list(FONT_SET[:5])
