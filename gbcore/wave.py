"""Wave channel that plays samples from a small pattern RAM."""

from dataclasses import dataclass, field

from gbcore.length import Length
from gbcore.mixing import bounded_wrapping_add, is_bit_set, length_enabled
from gbcore.period import Period

_MAX_WAVE_SAMPLE_STEPS = 31
_PERIOD_HIGH_TRIGGER_INDEX = 7
_WAVE_RAM_SIZE = 0x10


@dataclass
class WaveChannel:
    """A channel playing 4-bit samples from wave pattern RAM."""

    enabled: bool = False
    dac_enabled: bool = False
    length: Length = field(default_factory=Length)
    volume: int = 0
    period: Period = field(default_factory=Period)
    wave_position: int = 1
    wave_pattern_ram: bytearray = field(default_factory=lambda: bytearray(_WAVE_RAM_SIZE))

    def reset(self):
        """Return a powered-down channel keeping length timer, wave RAM and position."""
        return WaveChannel(
            length=self.length.reset_initial_settings(),
            wave_position=self.wave_position,
            wave_pattern_ram=bytearray(self.wave_pattern_ram),
        )

    def _advance_position(self):
        self.wave_position = bounded_wrapping_add(self.wave_position, _MAX_WAVE_SAMPLE_STEPS)

    def step(self, t_cycles):
        """Advance the frequency divider by the elapsed clock cycles."""
        if self.enabled:
            self.period.step(t_cycles // 2, self._advance_position)

    def should_clock_length_on_enable(self, original_period_high):
        """Return True when a write has just turned the length timer on."""
        return not length_enabled(original_period_high) and length_enabled(self.period.high)

    def should_clock_length_on_trigger(self):
        """Return True when a trigger should clock the length timer once."""
        return self.length.at_max_wave_channel_length() and length_enabled(self.period.high)

    def step_length(self):
        """Count the length timer down and turn the channel off at zero."""
        if length_enabled(self.period.high):
            self.length.step()
            if self.length.timer == 0:
                self.disable()

    def read_ram(self, address):
        """Return the wave RAM byte at ``address``."""
        return self.wave_pattern_ram[address]

    def write_ram(self, address, value):
        """Store ``value`` in wave RAM at ``address``."""
        self.wave_pattern_ram[address] = value

    def digital_output(self):
        """Return the current digital level, 7.5 when off or muted."""
        if not self.enabled:
            return 7.5
        byte = self.read_ram(self.wave_position // 2)
        sample = (byte & 0xF0) >> 4 if self.wave_position % 2 == 0 else byte & 0xF
        output_level = (self.volume & 0b01100000) >> 5
        if output_level == 0:
            return 7.5
        return float(sample >> (output_level - 1))

    def _corrupt_wave_ram(self):
        # Re-triggering right before a wave RAM read corrupts its first bytes.
        offset = ((self.wave_position + 1) >> 1) & 0xF
        ram = self.wave_pattern_ram
        if offset < 4:
            ram[0] = ram[offset]
        else:
            base = offset & ~3
            ram[0:4] = ram[base:base + 4]

    def trigger(self):
        """Restart the channel from the start of the wave pattern."""
        if self.enabled and self.period.divider == 1:
            self._corrupt_wave_ram()
        self.wave_position = 0
        if self.dac_enabled:
            self.enabled = True
        self.period.trigger()
        self.period.apply_wave_channel_trigger_delay()
        self.length.reload_wave_channel_timer_with_maximum()

    def disable(self):
        """Turn the channel off."""
        self.enabled = False

    def should_trigger(self):
        """Return True when the trigger bit of the period-high register is set."""
        return is_bit_set(self.period.high, _PERIOD_HIGH_TRIGGER_INDEX)