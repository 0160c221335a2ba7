import pytest

from gbcore.cpu import Cpu
from gbcore.interrupts import InterruptRegisters, InterruptType, service_interrupt
from gbcore.loads import pop_word


def _ready_cpu():
    cpu = Cpu()
    cpu.interrupts_enabled = True
    cpu.registers.program_counter = 0x1234
    cpu.registers.stack_pointer = 0xFFFE
    return cpu


@pytest.mark.parametrize(
    "kind, address",
    [
        (InterruptType.VBLANK, 0x40),
        (InterruptType.LCD_STATUS, 0x48),
        (InterruptType.TIMER_OVERFLOW, 0x50),
        (InterruptType.SERIAL_LINK, 0x58),
        (InterruptType.JOYPAD_PRESS, 0x60),
    ],
)
def test_isr_addresses(kind, address):
    assert kind.isr_address == address


def test_no_interrupt_when_nothing_fired():
    registers = InterruptRegisters(enabled=0x1F, flags=0)
    assert registers.fired_interrupt() is None
    assert registers.any_fired() is False


def test_only_low_five_bits_count():
    registers = InterruptRegisters(enabled=0xE0, flags=0xE0)
    assert registers.any_fired() is False
    assert registers.fired_interrupt() is None


def test_requires_both_enable_and_flag():
    registers = InterruptRegisters(enabled=0x01, flags=0x02)
    assert registers.any_fired() is False


def test_priority_picks_lowest_bit():
    registers = InterruptRegisters(enabled=0x1F, flags=0x06)
    assert registers.fired_interrupt() is InterruptType.LCD_STATUS


def test_acknowledge_clears_only_its_flag():
    registers = InterruptRegisters(enabled=0x1F, flags=0x1F)
    registers.acknowledge(InterruptType.TIMER_OVERFLOW)
    assert registers.flags == 0x1F & ~InterruptType.TIMER_OVERFLOW.mask
    assert registers.fired_interrupt() is InterruptType.VBLANK


def test_service_jumps_to_isr_and_pushes_return_address():
    cpu = _ready_cpu()
    registers = InterruptRegisters(enabled=0x04, flags=0x04)
    assert service_interrupt(cpu, registers) is True
    assert cpu.registers.program_counter == 0x50
    assert cpu.interrupts_enabled is False
    assert registers.flags == 0
    assert cpu.registers.stack_pointer == 0xFFFC
    assert pop_word(cpu) == 0x1234


def test_service_spends_five_machine_cycles():
    cpu = _ready_cpu()
    registers = InterruptRegisters(enabled=0x01, flags=0x01)
    service_interrupt(cpu, registers)
    assert cpu.total_clock_cycles == 5 * cpu.t_cycle_increment


def test_service_does_nothing_when_master_disabled():
    cpu = _ready_cpu()
    cpu.interrupts_enabled = False
    registers = InterruptRegisters(enabled=0x01, flags=0x01)
    assert service_interrupt(cpu, registers) is False
    assert cpu.registers.program_counter == 0x1234
    assert registers.flags == 0x01
    assert cpu.total_clock_cycles == 0


def test_service_does_nothing_without_pending_interrupt():
    cpu = _ready_cpu()
    registers = InterruptRegisters(enabled=0x1F, flags=0)
    assert service_interrupt(cpu, registers) is False
    assert cpu.interrupts_enabled is True
    assert cpu.registers.stack_pointer == 0xFFFE