"""Frequency divider shared by the pulse and wave channels."""

from dataclasses import dataclass

_WAVE_CHANNEL_PERIOD_DELAY = 3


@dataclass
class Period:
    """Period registers and the running divider counter."""

    low: int = 0
    high: int = 0
    divider: int = 0
    reloaded: bool = False

    def step(self, divider_increment, on_reload):
        """Count the divider down, calling ``on_reload`` each time it reloads."""
        self.reloaded = False
        for _ in range(divider_increment):
            self.divider = (self.divider - 1) & 0xFFFF
            if self.divider == 0:
                self.divider = self.calculate_divider()
                on_reload()
                self.reloaded = True
        if self.divider != self.calculate_divider():
            self.reloaded = False

    def calculate_value(self):
        """Return the eleven-bit period value from the two registers."""
        return ((self.high & 0b111) << 8) | self.low

    def calculate_divider(self):
        """Return the divider reload value for the current period."""
        return 2048 - self.calculate_value()

    def trigger(self):
        """Reload the divider from the period registers."""
        self.divider = self.calculate_divider()

    def apply_wave_channel_trigger_delay(self):
        """Delay the first wave channel sample after a trigger."""
        self.divider += _WAVE_CHANNEL_PERIOD_DELAY