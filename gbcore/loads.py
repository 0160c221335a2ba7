"""Load, store and stack instructions."""

from gbcore.cpu import RegisterPair  # noqa: F401  (pairs are passed in by callers)


def load_immediate_value(cpu, register):
    """Load the next instruction byte into a register."""
    cpu.write_register(register, cpu.read_next_byte())


def load_register(cpu, source, destination):
    """Copy one register into another."""
    cpu.write_register(destination, cpu.read_register(source))


def load_memory_byte(cpu, address, destination):
    """Load the byte at ``address`` into a register."""
    cpu.write_register(destination, cpu.read_byte(address))


def store_register(cpu, source, address):
    """Store a register at ``address``."""
    cpu.write_byte(address, cpu.read_register(source))


def load_immediate_value_in_memory(cpu, pair):
    """Store the next instruction byte at the address held in a register pair."""
    address = cpu.read_pair(pair)
    cpu.write_byte(address, cpu.read_next_byte())


def push_word(cpu, word):
    """Push a word onto the stack, high byte first."""
    cpu.step_machine_cycle()
    registers = cpu.registers
    registers.stack_pointer = (registers.stack_pointer - 1) & 0xFFFF
    cpu.write_byte(registers.stack_pointer, (word >> 8) & 0xFF)
    registers.stack_pointer = (registers.stack_pointer - 1) & 0xFFFF
    cpu.write_byte(registers.stack_pointer, word & 0xFF)


def push_pair(cpu, pair):
    """Push a register pair onto the stack."""
    push_word(cpu, cpu.read_pair(pair))


def pop_word(cpu):
    """Pop a word from the stack and return it."""
    registers = cpu.registers
    low = cpu.read_byte(registers.stack_pointer)
    registers.stack_pointer = (registers.stack_pointer + 1) & 0xFFFF
    high = cpu.read_byte(registers.stack_pointer)
    registers.stack_pointer = (registers.stack_pointer + 1) & 0xFFFF
    return (high << 8) | low


def pop_pair(cpu, pair):
    """Pop a word from the stack into a register pair."""
    cpu.write_pair(pair, pop_word(cpu))