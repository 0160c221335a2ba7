"""Arithmetic and logic instructions."""

from gbcore.cpu import Flag, Register, RegisterPair


def _set_flags(cpu, *, z=None, n=None, h=None, c=None):
    for flag, value in ((Flag.Z, z), (Flag.N, n), (Flag.H, h), (Flag.C, c)):
        if value is not None:
            cpu.set_flag(flag, value)


def add(cpu, register, value):
    """Add ``value`` to a register."""
    byte = cpu.read_register(register)
    total = byte + value
    result = total & 0xFF
    cpu.write_register(register, result)
    _set_flags(cpu, z=result == 0, n=False,
               h=(value & 0xF) + (byte & 0xF) > 0xF, c=total > 0xFF)


def add_to_pair(cpu, pair, value):
    """Add a word to a register pair, leaving Z untouched."""
    word = cpu.read_pair(pair)
    total = word + value
    cpu.write_pair(pair, total & 0xFFFF)
    _set_flags(cpu, n=False, h=(value & 0xFFF) + (word & 0xFFF) > 0xFFF, c=total > 0xFFFF)
    cpu.step_machine_cycle()


def add_with_carry(cpu, register, value):
    """Add ``value`` plus the carry flag to a register."""
    carry = int(cpu.is_flag_set(Flag.C))
    byte = cpu.read_register(register)
    total = byte + value + carry
    result = total & 0xFF
    cpu.write_register(register, result)
    _set_flags(cpu, z=result == 0, n=False,
               h=(value & 0xF) + (byte & 0xF) + carry > 0xF, c=total > 0xFF)


def subtract(cpu, register, value):
    """Subtract ``value`` from a register."""
    byte = cpu.read_register(register)
    result = (byte - value) & 0xFF
    cpu.write_register(register, result)
    _set_flags(cpu, z=result == 0, n=True, h=(byte & 0xF) < (value & 0xF), c=byte < value)


def subtract_with_carry(cpu, register, value):
    """Subtract ``value`` and the carry flag from a register."""
    carry = int(cpu.is_flag_set(Flag.C))
    byte = cpu.read_register(register)
    result = (byte - value - carry) & 0xFF
    cpu.write_register(register, result)
    _set_flags(cpu, z=result == 0, n=True,
               h=(byte & 0xF) < (value & 0xF) + carry, c=value + carry > byte)


def _logical(cpu, register, result, half_carry):
    cpu.write_register(register, result)
    _set_flags(cpu, z=result == 0, n=False, h=half_carry, c=False)


def logical_and(cpu, register, value):
    """AND ``value`` into a register."""
    _logical(cpu, register, cpu.read_register(register) & value, True)


def logical_or(cpu, register, value):
    """OR ``value`` into a register."""
    _logical(cpu, register, cpu.read_register(register) | value, False)


def logical_xor(cpu, register, value):
    """XOR ``value`` into a register."""
    _logical(cpu, register, cpu.read_register(register) ^ value, False)


def compare(cpu, register, value):
    """Set flags as a subtraction would, leaving the register unchanged."""
    byte = cpu.read_register(register)
    _set_flags(cpu, z=byte == value, n=True, h=(byte & 0xF) < (value & 0xF), c=byte < value)


def _incremented(cpu, byte):
    result = (byte + 1) & 0xFF
    _set_flags(cpu, z=result == 0, n=False, h=(byte & 0xF) == 0xF)
    return result


def _decremented(cpu, byte):
    result = (byte - 1) & 0xFF
    _set_flags(cpu, z=result == 0, n=True, h=(byte & 0xF) == 0)
    return result


def increment_register(cpu, register):
    """Add one to a register, leaving C untouched."""
    cpu.write_register(register, _incremented(cpu, cpu.read_register(register)))


def decrement_register(cpu, register):
    """Subtract one from a register, leaving C untouched."""
    cpu.write_register(register, _decremented(cpu, cpu.read_register(register)))


def increment_memory_byte(cpu):
    """Add one to the byte addressed by HL."""
    address = cpu.read_pair(RegisterPair.HL)
    byte = cpu.read_byte(address)
    cpu.write_byte(address, _incremented(cpu, byte))


def decrement_memory_byte(cpu):
    """Subtract one from the byte addressed by HL."""
    address = cpu.read_pair(RegisterPair.HL)
    byte = cpu.read_byte(address)
    cpu.write_byte(address, _decremented(cpu, byte))


def increment_pair(cpu, pair):
    """Add one to a register pair without touching flags."""
    cpu.write_pair(pair, (cpu.read_pair(pair) + 1) & 0xFFFF)
    cpu.step_machine_cycle()


def decrement_pair(cpu, pair):
    """Subtract one from a register pair without touching flags."""
    cpu.write_pair(pair, (cpu.read_pair(pair) - 1) & 0xFFFF)
    cpu.step_machine_cycle()


def bcd_adjust(cpu):
    """Adjust A to packed decimal after an addition or subtraction."""
    carry = cpu.is_flag_set(Flag.C)
    half_carry = cpu.is_flag_set(Flag.H)
    value = cpu.read_register(Register.A)

    if cpu.is_flag_set(Flag.N):
        if carry:
            value = (value - 0x60) & 0xFF
        if half_carry:
            value = (value - 0x6) & 0xFF
    else:
        if carry or value > 0x99:
            value = (value + 0x60) & 0xFF
            cpu.set_flag(Flag.C, True)
        if half_carry or (value & 0xF) > 0x9:
            value = (value + 0x6) & 0xFF

    cpu.write_register(Register.A, value)
    _set_flags(cpu, z=value == 0, h=False)