"""Jump, call, return and restart instructions."""

from gbcore.loads import pop_word, push_word


def _jump_if(cpu, address, condition):
    if condition:
        cpu.registers.program_counter = address
        cpu.step_machine_cycle()


def conditional_relative_jump(cpu, condition):
    """Jump by the signed next byte when ``condition`` holds."""
    offset = cpu.read_next_byte()
    if offset >= 0x80:
        offset -= 0x100
    target = (cpu.registers.program_counter + offset) & 0xFFFF
    _jump_if(cpu, target, condition)


def conditional_jump(cpu, condition):
    """Jump to the next instruction word when ``condition`` holds."""
    address = cpu.read_next_word()
    _jump_if(cpu, address, condition)


def call(cpu):
    """Push the return address and jump to the next instruction word."""
    address = cpu.read_next_word()
    push_word(cpu, cpu.registers.program_counter)
    cpu.registers.program_counter = address


def conditional_call(cpu, condition):
    """Call the next instruction word when ``condition`` holds."""
    address = cpu.read_next_word()
    if condition:
        push_word(cpu, cpu.registers.program_counter)
        cpu.registers.program_counter = address


def stack_return(cpu):
    """Pop the return address into the program counter."""
    cpu.registers.program_counter = pop_word(cpu)
    cpu.step_machine_cycle()


def conditional_stack_return(cpu, condition):
    """Return when ``condition`` holds; the check itself costs a cycle."""
    cpu.step_machine_cycle()
    if condition:
        stack_return(cpu)


def restart(cpu, address):
    """Push the program counter and jump to a fixed address."""
    push_word(cpu, cpu.registers.program_counter)
    cpu.registers.program_counter = address