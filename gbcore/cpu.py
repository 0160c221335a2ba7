"""Processor state, register access, flags and bus-cycle accounting."""

from dataclasses import dataclass, field
from enum import Enum

_BOOT_ROM_END = 0x100


class Register(Enum):
    """An eight-bit processor register, valued by its attribute name."""

    A = "a"
    B = "b"
    C = "c"
    D = "d"
    E = "e"
    F = "f"
    H = "h"
    L = "l"


class RegisterPair(Enum):
    """Two eight-bit registers read and written as one sixteen-bit word."""

    AF = (Register.A, Register.F)
    BC = (Register.B, Register.C)
    DE = (Register.D, Register.E)
    HL = (Register.H, Register.L)

    @property
    def first(self):
        return self.value[0]

    @property
    def second(self):
        return self.value[1]


class Flag(Enum):
    """A condition flag, valued by its bit mask in register F."""

    Z = 0x80
    N = 0x40
    H = 0x20
    C = 0x10


class BusActivityType(Enum):
    """Direction of a recorded bus access."""

    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class BusActivityEntry:
    """One recorded bus access during an instruction."""

    address: int
    value: int
    activity_type: BusActivityType


@dataclass
class Registers:
    """The processor register file."""

    a: int = 0
    b: int = 0
    c: int = 0
    d: int = 0
    e: int = 0
    h: int = 0
    l: int = 0  # noqa: E741
    f: int = 0
    opcode: int = 0
    program_counter: int = 0
    stack_pointer: int = 0


class Bus:
    """A flat 64 KiB address space; subclass it to attach real hardware."""

    def __init__(self):
        self.memory = bytearray(0x10000)
        self.synced_cycles = 0

    def read_byte(self, address):
        """Return the byte at ``address``."""
        return self.memory[address & 0xFFFF]

    def write_byte(self, address, value):
        """Store ``value`` at ``address``."""
        self.memory[address & 0xFFFF] = value & 0xFF

    def sync(self):
        """Advance the rest of the machine by one machine cycle; counts cycles."""
        self.synced_cycles += 1


class IllegalOpcodeError(RuntimeError):
    """Raised when the processor decodes an opcode that does not exist."""


def handle_illegal_opcode(opcode):
    """Raise :class:`IllegalOpcodeError` for ``opcode``."""
    raise IllegalOpcodeError(f"Encountered illegal opcode 0x{opcode:02X}")


@dataclass
class Cpu:
    """Processor state wired to a memory bus."""

    bus: Bus = field(default_factory=Bus)
    registers: Registers = field(default_factory=Registers)
    instruction_clock_cycles: int = 0
    total_clock_cycles: int = 0
    halted: bool = False
    halt_bug: bool = False
    interrupts_enabled: bool = False
    interrupt_enable_delay: int = 0
    interrupt_disable_delay: int = 0
    double_speed: bool = False
    processor_test_mode: bool = False
    opcode_bus_activity: list = field(default_factory=list)

    @property
    def t_cycle_increment(self):
        """Clock cycles in one machine cycle at the current speed."""
        return 2 if self.double_speed else 4

    def step_machine_cycle(self):
        """Spend one machine cycle and let the rest of the machine catch up."""
        increment = self.t_cycle_increment
        self.total_clock_cycles = (self.total_clock_cycles + increment) & 0xFFFFFFFF
        self.instruction_clock_cycles = (self.instruction_clock_cycles + increment) & 0xFF
        self.bus.sync()

    def step_machine_cycles(self, cycles):
        """Spend ``cycles`` machine cycles."""
        for _ in range(cycles):
            self.step_machine_cycle()

    def _record_bus_activity(self, address, value, activity_type):
        current_cycle = self.instruction_clock_cycles // self.t_cycle_increment
        idle_cycles = (current_cycle - 1) - len(self.opcode_bus_activity)
        self.opcode_bus_activity.extend([None] * max(0, idle_cycles))
        self.opcode_bus_activity.append(BusActivityEntry(address, value, activity_type))

    def read_byte(self, address):
        """Read one byte over the bus, costing one machine cycle."""
        self.step_machine_cycle()
        value = self.bus.read_byte(address)
        if self.processor_test_mode:
            self._record_bus_activity(address, value, BusActivityType.READ)
        return value

    def read_word(self, address):
        """Read a little-endian word over the bus."""
        low = self.read_byte(address)
        high = self.read_byte((address + 1) & 0xFFFF)
        return (high << 8) | low

    def write_byte(self, address, value):
        """Write one byte over the bus, costing one machine cycle."""
        self.step_machine_cycle()
        self.bus.write_byte(address, value)
        if self.processor_test_mode:
            self._record_bus_activity(address, value, BusActivityType.WRITE)

    def write_word(self, address, word):
        """Write a little-endian word over the bus."""
        self.write_byte(address, word & 0xFF)
        self.write_byte((address + 1) & 0xFFFF, (word >> 8) & 0xFF)

    def read_register(self, register):
        """Return the value of an eight-bit register."""
        return getattr(self.registers, register.value)

    def write_register(self, register, value):
        """Store ``value`` in an eight-bit register."""
        setattr(self.registers, register.value, value & 0xFF)

    def read_pair(self, pair):
        """Return the sixteen-bit value of a register pair."""
        return (self.read_register(pair.first) << 8) | self.read_register(pair.second)

    def write_pair(self, pair, value):
        """Store a sixteen-bit value in a register pair."""
        self.write_register(pair.first, (value >> 8) & 0xFF)
        self.write_register(pair.second, value & 0xFF)

    def set_flag(self, flag, value):
        """Set or clear one condition flag."""
        if value:
            self.registers.f |= flag.value
        else:
            self.registers.f &= ~flag.value & 0xFF

    def is_flag_set(self, flag):
        """Return True when ``flag`` is set."""
        return self.registers.f & flag.value == flag.value

    def read_next_byte(self):
        """Fetch the byte at the program counter and advance past it."""
        value = self.read_byte(self.registers.program_counter)
        self.registers.program_counter = (self.registers.program_counter + 1) & 0xFFFF
        return value

    def read_next_word(self):
        """Fetch the word at the program counter and advance past it."""
        value = self.read_word(self.registers.program_counter)
        self.registers.program_counter = (self.registers.program_counter + 2) & 0xFFFF
        return value

    def at_end_of_boot_rom(self):
        """Return True when execution has reached the cartridge entry point."""
        return self.registers.program_counter == _BOOT_ROM_END