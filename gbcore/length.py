"""Length timer that silences a channel after a set duration."""

from dataclasses import dataclass

WAVE_MAX_LENGTH = 256
DEFAULT_MAX_LENGTH = 64


@dataclass
class Length:
    """Length timer state for one channel."""

    initial_settings: int = 0
    timer: int = 0

    def reset_initial_settings(self):
        """Return a copy with cleared settings that keeps the running timer."""
        return Length(initial_settings=0, timer=self.timer)

    def step(self):
        """Count the timer down by one, stopping at zero."""
        if self.timer > 0:
            self.timer -= 1

    def initialize_timer(self):
        """Load the timer from the low six bits of the settings."""
        self.timer = DEFAULT_MAX_LENGTH - (self.initial_settings & 0b00111111)

    def initialize_wave_channel_timer(self):
        """Load the timer from the full eight-bit wave channel settings."""
        self.timer = WAVE_MAX_LENGTH - self.initial_settings

    def reload_timer_with_maximum(self):
        """Reload an expired timer with the full length."""
        if self.timer == 0:
            self.timer = DEFAULT_MAX_LENGTH

    def reload_wave_channel_timer_with_maximum(self):
        """Reload an expired wave channel timer with the full length."""
        if self.timer == 0:
            self.timer = WAVE_MAX_LENGTH

    def at_max_length(self):
        """Return True when the timer holds the full length."""
        return self.timer == DEFAULT_MAX_LENGTH

    def at_max_wave_channel_length(self):
        """Return True when the wave channel timer holds the full length."""
        return self.timer == WAVE_MAX_LENGTH