"""Noise channel driven by a linear-feedback shift register."""

from dataclasses import dataclass, field

from gbcore.envelope import Envelope
from gbcore.length import Length
from gbcore.mixing import is_bit_set, length_enabled

_WIDTH_MODE_INDEX = 3
_CONTROL_TRIGGER_INDEX = 7


@dataclass
class NoiseChannel:
    """A pseudo-random noise channel with length and envelope."""

    enabled: bool = False
    dac_enabled: bool = False
    length: Length = field(default_factory=Length)
    envelope: Envelope = field(default_factory=Envelope)
    polynomial: int = 0
    lfsr: int = 0
    control: int = 0
    period_divider: int = 0
    instruction_cycles: int = 0

    def reset(self):
        """Return a powered-down channel that keeps the length timer."""
        return NoiseChannel(length=self.length.reset_initial_settings())

    def calculate_period_divider(self):
        """Return the clock divider selected by the polynomial register."""
        shift_amount = (self.polynomial & 0b11110000) >> 4
        divisor_code = self.polynomial & 0b111
        divisor = 8 if divisor_code == 0 else divisor_code << 4
        return (divisor << shift_amount) & 0xFFFF

    def _next_lfsr(self):
        xor_result = ~((self.lfsr & 1) ^ ((self.lfsr >> 1) & 1)) & 1
        next_lfsr = self.lfsr | (xor_result << 15)
        if is_bit_set(self.polynomial, _WIDTH_MODE_INDEX):
            next_lfsr |= xor_result << 7
        return next_lfsr >> 1

    def step(self, t_cycles):
        """Advance the divider and shift the register when it expires."""
        self.instruction_cycles = (self.instruction_cycles + t_cycles) & 0xFFFF
        if self.instruction_cycles >= self.period_divider:
            self.instruction_cycles = 0
            self.period_divider = self.calculate_period_divider()
            self.lfsr = self._next_lfsr()

    def step_envelope(self):
        """Advance the envelope while the channel is on."""
        if self.enabled:
            self.envelope.step()

    def should_clock_length_on_enable(self, original_control):
        """Return True when a write has just turned the length timer on."""
        return not length_enabled(original_control) and length_enabled(self.control)

    def should_clock_length_on_trigger(self):
        """Return True when a trigger should clock the length timer once."""
        return self.length.at_max_length() and length_enabled(self.control)

    def step_length(self):
        """Count the length timer down and turn the channel off at zero."""
        if length_enabled(self.control):
            self.length.step()
            if self.length.timer == 0:
                self.disable()

    def digital_output(self):
        """Return the current digital level, 7.5 when the channel is off."""
        if not self.enabled:
            return 7.5
        amplitude = self.lfsr & 0x01
        return float(amplitude * self.envelope.current_volume)

    def trigger(self):
        """Restart the channel."""
        if self.dac_enabled:
            self.enabled = True
        self.period_divider = self.calculate_period_divider()
        self.lfsr = 0
        self.length.reload_timer_with_maximum()
        self.envelope.trigger()

    def disable(self):
        """Turn the channel off."""
        self.enabled = False

    def should_trigger(self):
        """Return True when the trigger bit of the control register is set."""
        return is_bit_set(self.control, _CONTROL_TRIGGER_INDEX)