"""Rotate, shift, swap and single-bit instructions."""

from gbcore.cpu import Flag, RegisterPair


def _set_result_flags(cpu, result, carry):
    cpu.set_flag(Flag.Z, result == 0)
    cpu.set_flag(Flag.N, False)
    cpu.set_flag(Flag.H, False)
    cpu.set_flag(Flag.C, carry)


def _rotate_left(cpu, byte):
    msb = byte >> 7
    result = ((byte << 1) | msb) & 0xFF
    _set_result_flags(cpu, result, msb == 1)
    return result


def _rotate_left_through_carry(cpu, byte):
    carry_in = 1 if cpu.is_flag_set(Flag.C) else 0
    msb = byte >> 7
    result = ((byte << 1) | carry_in) & 0xFF
    _set_result_flags(cpu, result, msb == 1)
    return result


def _rotate_right(cpu, byte):
    lsb = byte & 1
    result = (lsb << 7) | (byte >> 1)
    _set_result_flags(cpu, result, lsb == 1)
    return result


def _rotate_right_through_carry(cpu, byte):
    carry_in = 1 if cpu.is_flag_set(Flag.C) else 0
    lsb = byte & 1
    result = (carry_in << 7) | (byte >> 1)
    _set_result_flags(cpu, result, lsb == 1)
    return result


def _shift_left(cpu, byte):
    result = (byte << 1) & 0xFF
    _set_result_flags(cpu, result, byte >> 7 == 1)
    return result


def _shift_right(cpu, byte, maintain_msb):
    msb = byte & 0x80 if maintain_msb else 0
    result = (byte >> 1) | msb
    _set_result_flags(cpu, result, byte & 1 == 1)
    return result


def _swap(cpu, byte):
    result = ((byte & 0xF) << 4) | ((byte >> 4) & 0xF)
    _set_result_flags(cpu, result, False)
    return result


def _apply_to_register(cpu, register, operation):
    cpu.write_register(register, operation(cpu, cpu.read_register(register)))


def _apply_to_memory(cpu, address, operation):
    byte = cpu.read_byte(address)
    cpu.write_byte(address, operation(cpu, byte))


def _apply_to_hl(cpu, operation):
    _apply_to_memory(cpu, cpu.read_pair(RegisterPair.HL), operation)


def rotate_register_left(cpu, register):
    """Rotate a register left, bit 7 going to bit 0 and carry."""
    _apply_to_register(cpu, register, _rotate_left)


def rotate_register_left_through_carry(cpu, register):
    """Rotate a register left through the carry flag."""
    _apply_to_register(cpu, register, _rotate_left_through_carry)


def rotate_register_right(cpu, register):
    """Rotate a register right, bit 0 going to bit 7 and carry."""
    _apply_to_register(cpu, register, _rotate_right)


def rotate_register_right_through_carry(cpu, register):
    """Rotate a register right through the carry flag."""
    _apply_to_register(cpu, register, _rotate_right_through_carry)


def rotate_memory_byte_left(cpu):
    """Rotate the byte addressed by HL left."""
    _apply_to_hl(cpu, _rotate_left)


def rotate_memory_byte_left_through_carry(cpu):
    """Rotate the byte addressed by HL left through the carry flag."""
    _apply_to_hl(cpu, _rotate_left_through_carry)


def rotate_memory_byte_right(cpu):
    """Rotate the byte addressed by HL right."""
    _apply_to_hl(cpu, _rotate_right)


def rotate_memory_byte_right_through_carry(cpu):
    """Rotate the byte addressed by HL right through the carry flag."""
    _apply_to_hl(cpu, _rotate_right_through_carry)


def swap_nibbles_in_register(cpu, register):
    """Exchange the high and low nibbles of a register."""
    _apply_to_register(cpu, register, _swap)


def swap_nibbles_in_memory_byte(cpu, address):
    """Exchange the high and low nibbles of the byte at ``address``."""
    _apply_to_memory(cpu, address, _swap)


def shift_register_left(cpu, register):
    """Shift a register left, bit 7 going to carry."""
    _apply_to_register(cpu, register, _shift_left)


def shift_memory_byte_left(cpu):
    """Shift the byte addressed by HL left."""
    _apply_to_hl(cpu, _shift_left)


def shift_register_right_maintaining_msb(cpu, register):
    """Shift a register right arithmetically, keeping bit 7."""
    _apply_to_register(cpu, register, lambda c, b: _shift_right(c, b, True))


def shift_memory_byte_right_maintaining_msb(cpu):
    """Shift the byte addressed by HL right arithmetically, keeping bit 7."""
    _apply_to_hl(cpu, lambda c, b: _shift_right(c, b, True))


def shift_register_right(cpu, register):
    """Shift a register right logically, bit 0 going to carry."""
    _apply_to_register(cpu, register, lambda c, b: _shift_right(c, b, False))


def shift_memory_byte_right(cpu):
    """Shift the byte addressed by HL right logically."""
    _apply_to_hl(cpu, lambda c, b: _shift_right(c, b, False))


def _test_bit(cpu, byte, bit_index):
    cpu.set_flag(Flag.Z, (byte >> bit_index) & 1 == 0)
    cpu.set_flag(Flag.N, False)
    cpu.set_flag(Flag.H, True)


def test_register_bit(cpu, register, bit_index):
    """Set Z when bit ``bit_index`` of a register is clear."""
    _test_bit(cpu, cpu.read_register(register), bit_index)


def test_memory_bit(cpu, bit_index):
    """Set Z when bit ``bit_index`` of the byte addressed by HL is clear."""
    byte = cpu.read_byte(cpu.read_pair(RegisterPair.HL))
    _test_bit(cpu, byte, bit_index)


def reset_register_bit(cpu, register, bit_index):
    """Clear bit ``bit_index`` of a register."""
    cpu.write_register(register, cpu.read_register(register) & ~(1 << bit_index) & 0xFF)


def reset_memory_bit(cpu, bit_index):
    """Clear bit ``bit_index`` of the byte addressed by HL."""
    _apply_to_hl(cpu, lambda c, b: b & ~(1 << bit_index) & 0xFF)


def set_register_bit(cpu, register, bit_index):
    """Set bit ``bit_index`` of a register."""
    cpu.write_register(register, cpu.read_register(register) | (1 << bit_index))


def set_memory_bit(cpu, bit_index):
    """Set bit ``bit_index`` of the byte addressed by HL."""
    _apply_to_hl(cpu, lambda c, b: b | (1 << bit_index))