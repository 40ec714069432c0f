# tests/core/test_snapshot.py
"""
chip8_tracer.core.snapshotモジュールの単体テスト。
"""
import pytest
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.core.snapshot import (
    BusAccessType,
    BusAccess,
    Operation,
    Metadata,
    Snapshot,
)

# @intent:test_suite CPUとバスの状態を記録する不変スナップショットデータ構造の検証。

class TestOperation:
    # @intent:test_case_init 既定値で初期化されることを検証します。
    def test_operation_defaults(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        assert op.operands == []
        assert op.operand_bytes == []
        assert op.length == 1
        assert op.form is None

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_operation_immutability(self):
        op = Operation(opcode_hex="6A02", mnemonic="LD", operands=["VA", "#$02"])
        with pytest.raises(AttributeError):
            op.mnemonic = "ADD"


class TestSnapshot:
    # @intent:test_case_init Snapshotが各要素を保持することを検証します。
    def test_snapshot_init(self):
        state = Chip8CpuState(pc=0x202)
        op = Operation(opcode_hex="1200", mnemonic="JP", operands=["$200"], length=2)
        meta = Metadata(cycle_count=1, symbol_info="200: JP $200")
        access = BusAccess(address=0x200, data=0x12, access_type=BusAccessType.READ)
        snapshot = Snapshot(state=state, operation=op, metadata=meta, bus_activity=[access])

        assert snapshot.state.pc == 0x202
        assert snapshot.operation.mnemonic == "JP"
        assert snapshot.metadata.symbol_info == "200: JP $200"
        assert snapshot.bus_activity[0].access_type == BusAccessType.READ

    def test_snapshot_immutability(self):
        snapshot = Snapshot(
            state=Chip8CpuState(),
            operation=Operation(opcode_hex="00E0", mnemonic="CLS"),
            metadata=Metadata(cycle_count=0),
        )
        with pytest.raises(AttributeError):
            snapshot.state = Chip8CpuState()
        assert snapshot.bus_activity == []
