"""Volume envelope shared by the pulse and noise channels."""

from dataclasses import dataclass

from gbcore.mixing import is_bit_set

_DIRECTION_INDEX = 3
_MAX_VOLUME = 0xF


@dataclass
class Envelope:
    """Volume envelope state driven by its settings register."""

    initial_settings: int = 0
    current_volume: int = 0
    timer: int = 0

    @property
    def _initial_timer(self):
        return self.initial_settings & 0b111

    def step(self):
        """Advance the envelope by one envelope tick."""
        initial_timer = self._initial_timer
        if initial_timer == 0:
            return
        upwards = is_bit_set(self.initial_settings, _DIRECTION_INDEX)
        if self.timer > 0:
            self.timer -= 1
        if self.timer == 0:
            self.timer = initial_timer
            if upwards and self.current_volume < _MAX_VOLUME:
                self.current_volume += 1
            elif not upwards and self.current_volume > 0:
                self.current_volume -= 1

    def trigger(self):
        """Reload timer and volume from the settings register."""
        self.timer = self._initial_timer
        self.current_volume = (self.initial_settings & 0b11110000) >> 4

    def should_disable_dac(self):
        """Return True when the settings turn the channel DAC off."""
        return self.initial_settings & 0xF8 == 0