"""Interrupt flags, priority resolution and dispatch to service routines."""

from dataclasses import dataclass
from enum import Enum

from gbcore.jumps import restart

_INTERRUPT_BITS_MASK = 0x1F
_DISPATCH_MACHINE_CYCLES = 2


class InterruptType(Enum):
    """An interrupt source, valued by its flag bit and service routine address."""

    VBLANK = (0x01, 0x40)
    LCD_STATUS = (0x02, 0x48)
    TIMER_OVERFLOW = (0x04, 0x50)
    SERIAL_LINK = (0x08, 0x58)
    JOYPAD_PRESS = (0x10, 0x60)

    @property
    def mask(self):
        """The bit of this interrupt in the enable and flag registers."""
        return self.value[0]

    @property
    def isr_address(self):
        """The address of this interrupt's service routine."""
        return self.value[1]


@dataclass
class InterruptRegisters:
    """The interrupt enable (IE) and interrupt flag (IF) registers."""

    enabled: int = 0
    flags: int = 0

    def _fired_bits(self):
        return self.enabled & self.flags & _INTERRUPT_BITS_MASK

    def fired_interrupt(self):
        """Return the highest-priority pending interrupt, or None."""
        fired = self._fired_bits()
        return next((kind for kind in InterruptType if fired & kind.mask), None)

    def any_fired(self):
        """Return True when some enabled interrupt is pending."""
        return self._fired_bits() != 0

    def acknowledge(self, interrupt):
        """Clear the pending flag of ``interrupt``."""
        self.flags &= ~interrupt.mask & 0xFF


def service_interrupt(cpu, registers):
    """Dispatch the highest-priority pending interrupt; return True if one ran."""
    if not (cpu.interrupts_enabled and registers.any_fired()):
        return False
    interrupt = registers.fired_interrupt()
    if interrupt is None:
        return False
    cpu.interrupts_enabled = False
    registers.acknowledge(interrupt)
    cpu.step_machine_cycles(_DISPATCH_MACHINE_CYCLES)
    restart(cpu, interrupt.isr_address)
    return True