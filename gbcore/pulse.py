"""Square-wave channels, the first of which carries a frequency sweep."""

from dataclasses import dataclass, field

from gbcore.envelope import Envelope
from gbcore.length import Length
from gbcore.mixing import bounded_wrapping_add, get_bit, is_bit_set, length_enabled
from gbcore.period import Period

_MAX_WAVEFORM_STEPS = 7
_PERIOD_HIGH_TRIGGER_INDEX = 7
_SWEEP_DIRECTION_INDEX = 3
_MAX_FREQUENCY = 2047

_WAVEFORMS = (0b00000001, 0b00000011, 0b00001111, 0b11111100)


@dataclass
class Sweep:
    """Frequency sweep state for the first pulse channel."""

    initial_settings: int = 0
    enabled: bool = False
    shadow_frequency: int = 0
    timer: int = 0
    frequency_calculated: bool = False

    @property
    def shift(self):
        return self.initial_settings & 0b111

    @property
    def period(self):
        return (self.initial_settings & 0b01110000) >> 4

    @property
    def decrementing(self):
        return is_bit_set(self.initial_settings, _SWEEP_DIRECTION_INDEX)


@dataclass
class PulseChannel:
    """A square-wave channel with duty, length, envelope and optional sweep."""

    enabled: bool = False
    dac_enabled: bool = False
    wave_duty_position: int = 0
    sweep: Sweep = field(default_factory=Sweep)
    length: Length = field(default_factory=Length)
    envelope: Envelope = field(default_factory=Envelope)
    period: Period = field(default_factory=Period)

    def reset(self):
        """Return a powered-down channel that keeps the length timer."""
        return PulseChannel(length=self.length.reset_initial_settings())

    def _advance_duty(self):
        self.wave_duty_position = bounded_wrapping_add(
            self.wave_duty_position, _MAX_WAVEFORM_STEPS
        )

    def step(self, t_cycles):
        """Advance the frequency divider by the elapsed clock cycles."""
        if self.enabled:
            self.period.step(t_cycles // 4, self._advance_duty)

    def step_envelope(self):
        """Advance the envelope while the channel is on."""
        if self.enabled:
            self.envelope.step()

    def should_clock_length_on_enable(self, original_period_high):
        """Return True when a write has just turned the length timer on."""
        return not length_enabled(original_period_high) and length_enabled(self.period.high)

    def should_clock_length_on_trigger(self):
        """Return True when a trigger should clock the length timer once."""
        return self.length.at_max_length() and length_enabled(self.period.high)

    def step_length(self):
        """Count the length timer down and turn the channel off at zero."""
        if length_enabled(self.period.high):
            self.length.step()
            if self.length.timer == 0:
                self.disable()

    def digital_output(self):
        """Return the current digital level, 7.5 when the channel is off."""
        if not self.enabled:
            return 7.5
        wave_duty = (self.length.initial_settings & 0b11000000) >> 6
        amplitude = get_bit(_WAVEFORMS[wave_duty], self.wave_duty_position)
        return float(amplitude * self.envelope.current_volume)

    def step_sweep(self):
        """Advance the frequency sweep by one sweep tick."""
        if not self.enabled:
            return
        sweep = self.sweep
        if sweep.timer > 0:
            sweep.timer -= 1
        if sweep.timer != 0:
            return
        sweep_period = sweep.period
        self.load_sweep_timer(sweep_period)
        if sweep.enabled and sweep_period > 0:
            new_frequency = self.calculate_sweep_frequency()
            if new_frequency <= _MAX_FREQUENCY and sweep.shift > 0:
                sweep.shadow_frequency = new_frequency
                self.period.low = new_frequency & 0xFF
                self.period.high = (self.period.high & 0b11111000) | ((new_frequency & 0x700) >> 8)
                self.calculate_sweep_frequency()
        else:
            sweep.frequency_calculated = False

    def calculate_sweep_frequency(self):
        """Compute the next swept frequency, turning the channel off on overflow."""
        sweep = self.sweep
        delta = sweep.shadow_frequency >> sweep.shift
        if sweep.decrementing:
            new_frequency = sweep.shadow_frequency - delta
        else:
            new_frequency = sweep.shadow_frequency + delta
        if new_frequency > _MAX_FREQUENCY:
            self.disable()
        else:
            sweep.frequency_calculated = True
        return new_frequency

    def load_sweep_timer(self, sweep_period):
        """Reload the sweep timer, using 8 for a zero period."""
        self.sweep.timer = sweep_period if sweep_period > 0 else 8

    def update_sweep_settings(self, new_settings):
        """Write the sweep register, applying the negate-mode exit quirk."""
        was_decrementing = self.sweep.decrementing
        self.sweep.initial_settings = new_settings
        if was_decrementing and not self.sweep.decrementing and self.sweep.frequency_calculated:
            self.disable()

    def trigger(self, with_sweep):
        """Restart the channel, and its sweep when ``with_sweep`` is set."""
        if self.dac_enabled:
            self.enabled = True
        self.period.trigger()
        self.length.reload_timer_with_maximum()
        self.envelope.trigger()
        if with_sweep:
            self._trigger_sweep()

    def _trigger_sweep(self):
        sweep = self.sweep
        sweep.shadow_frequency = self.period.calculate_value()
        sweep_period = sweep.period
        self.load_sweep_timer(sweep_period)
        shift = sweep.shift
        sweep.enabled = sweep_period > 0 or shift > 0
        if shift > 0:
            self.calculate_sweep_frequency()
        else:
            sweep.frequency_calculated = False

    def disable(self):
        """Turn the channel off."""
        self.enabled = False

    def should_trigger(self):
        """Return True when the trigger bit of the period-high register is set."""
        return is_bit_set(self.period.high, _PERIOD_HIGH_TRIGGER_INDEX)