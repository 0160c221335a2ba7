"""Audio processing unit: four sound channels, frame sequencer and stereo output."""

import math
from dataclasses import dataclass, field, fields

from gbcore.mixing import (
    as_dac_output,
    bounded_wrapping_add,
    calculate_left_stereo_sample,
    calculate_right_stereo_sample,
    get_bit,
    is_bit_set,
)
from gbcore.noise import NoiseChannel
from gbcore.pulse import PulseChannel
from gbcore.wave import WaveChannel

_CH3_DAC_ENABLED_INDEX = 7
_APU_ENABLED_INDEX = 7
_MAX_DIV_APU_STEPS = 7

CPU_RATE = 4194304
SAMPLE_RATE = 48000
ENQUEUE_RATE = CPU_RATE // SAMPLE_RATE
MAX_AUDIO_BUFFER_SIZE = 512

_CHANNEL_STEP_RATE = 4

_NORMAL_SPEED_T_CYCLES = 4
_DOUBLE_SPEED_T_CYCLES = 2

_ENVELOPE_STEP = 7
_LENGTH_STEPS = frozenset({0, 2, 4, 6})
_SWEEP_STEPS = frozenset({2, 6})
_LENGTH_PERIOD_FIRST_HALF_STEPS = frozenset({1, 3, 5, 7})


def _sample_weight(steps_per_enqueue, steps_since_enqueue):
    step_index = steps_per_enqueue - steps_since_enqueue
    return (math.log(step_index) + 1.0) / (math.log(steps_per_enqueue) + 1.0)


@dataclass
class Apu:
    """State of the sound hardware and the queues of produced stereo samples."""

    enabled: bool = False
    sound_panning: int = 0
    master_volume: int = 0
    channel1: PulseChannel = field(default_factory=PulseChannel)
    channel2: PulseChannel = field(default_factory=PulseChannel)
    channel3: WaveChannel = field(default_factory=WaveChannel)
    channel4: NoiseChannel = field(default_factory=NoiseChannel)
    divider_apu: int = 0
    last_divider_time: int = 0
    audio_buffer_clock: int = 0
    channel_clock: int = 0
    left_sample_queue: list = field(default_factory=list)
    right_sample_queue: list = field(default_factory=list)
    summed_channel1_sample: float = 0.0
    summed_channel2_sample: float = 0.0
    summed_channel3_sample: float = 0.0
    summed_channel4_sample: float = 0.0

    def reset(self):
        """Power the unit down, keeping length timers and wave RAM."""
        fresh = Apu(
            channel1=self.channel1.reset(),
            channel2=self.channel2.reset(),
            channel3=self.channel3.reset(),
            channel4=self.channel4.reset(),
        )
        for item in fields(self):
            setattr(self, item.name, getattr(fresh, item.name))

    def _should_step_div_apu(self, divider):
        return get_bit(self.last_divider_time, 4) == 1 and get_bit(divider, 4) == 0

    def _step_div_apu(self, divider):
        if not self._should_step_div_apu(divider):
            return
        current = self.divider_apu
        if current == _ENVELOPE_STEP:
            self.channel1.step_envelope()
            self.channel2.step_envelope()
            self.channel4.step_envelope()
        if current in _LENGTH_STEPS:
            self.channel1.step_length()
            self.channel2.step_length()
            self.channel3.step_length()
            self.channel4.step_length()
        if current in _SWEEP_STEPS:
            self.channel1.step_sweep()
        self.divider_apu = bounded_wrapping_add(self.divider_apu, _MAX_DIV_APU_STEPS)

    def _track_digital_outputs(self, weight):
        self.summed_channel1_sample += self.channel1.digital_output() * weight
        self.summed_channel2_sample += self.channel2.digital_output() * weight
        self.summed_channel3_sample += self.channel3.digital_output() * weight
        self.summed_channel4_sample += self.channel4.digital_output() * weight

    def _clear_summed_samples(self):
        self.summed_channel1_sample = 0.0
        self.summed_channel2_sample = 0.0
        self.summed_channel3_sample = 0.0
        self.summed_channel4_sample = 0.0

    def _enqueue_audio_samples(self, increment, in_color_bios):
        # The colour boot ROM runs silently so that it appears to be skipped.
        if in_color_bios:
            return
        self.audio_buffer_clock = (self.audio_buffer_clock + increment) & 0xFF
        steps_since_enqueue = self.audio_buffer_clock // increment
        steps_per_enqueue = ENQUEUE_RATE

        self._track_digital_outputs(_sample_weight(steps_per_enqueue, steps_since_enqueue))

        if self.audio_buffer_clock < ENQUEUE_RATE:
            return
        self.audio_buffer_clock = 0

        dac_outputs = [
            as_dac_output(summed / steps_since_enqueue)
            for summed in (
                self.summed_channel1_sample,
                self.summed_channel2_sample,
                self.summed_channel3_sample,
                self.summed_channel4_sample,
            )
        ]
        left_volume = (self.master_volume & 0b01110000) >> 4
        right_volume = self.master_volume & 0b111
        self.left_sample_queue.append(
            calculate_left_stereo_sample(self.sound_panning, left_volume, *dac_outputs)
        )
        self.right_sample_queue.append(
            calculate_right_stereo_sample(self.sound_panning, right_volume, *dac_outputs)
        )
        self._clear_summed_samples()

    def step(self, divider, double_speed, in_color_bios):
        """Advance the unit by one machine cycle given the current timer divider."""
        increment = _DOUBLE_SPEED_T_CYCLES if double_speed else _NORMAL_SPEED_T_CYCLES
        self.channel_clock = (self.channel_clock + increment) & 0xFF

        if self.enabled and self.channel_clock >= _CHANNEL_STEP_RATE:
            self.channel_clock = 0
            self.channel1.step(increment)
            self.channel2.step(increment)
            self.channel3.step(increment)
            self.channel4.step(increment)
            self._step_div_apu(divider)

        self._enqueue_audio_samples(increment, in_color_bios)
        self.last_divider_time = divider

    def audio_buffers_full(self):
        """Return True when both sample queues hold a full buffer."""
        return (
            len(self.left_sample_queue) >= MAX_AUDIO_BUFFER_SIZE
            and len(self.right_sample_queue) >= MAX_AUDIO_BUFFER_SIZE
        )

    def clear_audio_buffers(self):
        """Empty both sample queues."""
        self.left_sample_queue.clear()
        self.right_sample_queue.clear()

    def _in_length_period_first_half(self):
        return self.divider_apu in _LENGTH_PERIOD_FIRST_HALF_STEPS

    def _write_pulse_period_high(self, channel, value, with_sweep):
        if not self.enabled:
            return
        original = channel.period.high
        channel.period.high = value
        first_half = self._in_length_period_first_half()
        if channel.should_clock_length_on_enable(original) and first_half:
            channel.step_length()
        if channel.should_trigger():
            channel.trigger(with_sweep)
            if channel.should_clock_length_on_trigger() and first_half:
                channel.step_length()

    def write_ch1_period_high(self, value):
        """Write NR14: period high bits, length enable and trigger."""
        self._write_pulse_period_high(self.channel1, value, True)

    def write_ch2_period_high(self, value):
        """Write NR24: period high bits, length enable and trigger."""
        self._write_pulse_period_high(self.channel2, value, False)

    def write_ch3_period_high(self, value):
        """Write NR34: period high bits, length enable and trigger."""
        if not self.enabled:
            return
        channel = self.channel3
        original = channel.period.high
        channel.period.high = value
        first_half = self._in_length_period_first_half()
        if channel.should_clock_length_on_enable(original) and first_half:
            channel.step_length()
        if channel.should_trigger():
            channel.trigger()
            if channel.should_clock_length_on_trigger() and first_half:
                channel.step_length()

    def write_ch4_control(self, value):
        """Write NR44: length enable and trigger."""
        if not self.enabled:
            return
        channel = self.channel4
        original = channel.control
        channel.control = value
        first_half = self._in_length_period_first_half()
        if channel.should_clock_length_on_enable(original) and first_half:
            channel.step_length()
        if channel.should_trigger():
            channel.trigger()
            if channel.should_clock_length_on_trigger() and first_half:
                channel.step_length()

    def _write_envelope_settings(self, channel, value):
        if not self.enabled:
            return
        channel.envelope.initial_settings = value
        should_disable = channel.envelope.should_disable_dac()
        channel.dac_enabled = not should_disable
        if should_disable:
            channel.disable()

    def write_ch1_envelope_settings(self, value):
        """Write NR12: initial volume and envelope."""
        self._write_envelope_settings(self.channel1, value)

    def write_ch2_envelope_settings(self, value):
        """Write NR22: initial volume and envelope."""
        self._write_envelope_settings(self.channel2, value)

    def write_ch3_dac_enabled(self, value):
        """Write NR30: wave channel DAC on or off."""
        if not self.enabled:
            return
        should_disable = not is_bit_set(value, _CH3_DAC_ENABLED_INDEX)
        self.channel3.dac_enabled = not should_disable
        if should_disable:
            self.channel3.disable()

    def write_ch4_envelope_settings(self, value):
        """Write NR42: initial volume and envelope."""
        self._write_envelope_settings(self.channel4, value)

    def read_audio_master_control(self):
        """Read NR52: power bit and per-channel on flags."""
        return (
            (int(self.enabled) << 7)
            | 0b01110000
            | (int(self.channel4.enabled) << 3)
            | (int(self.channel3.enabled) << 2)
            | (int(self.channel2.enabled) << 1)
            | int(self.channel1.enabled)
        )

    def write_audio_master_control(self, value):
        """Write NR52: powering the unit off resets it."""
        self.enabled = is_bit_set(value, _APU_ENABLED_INDEX)
        if not self.enabled:
            self.reset()

    def read_wave_ram(self, address):
        """Read wave RAM; while playing only the byte being read is reachable."""
        channel = self.channel3
        if not channel.enabled:
            return channel.read_ram(address)
        if channel.period.reloaded:
            return channel.read_ram(channel.wave_position // 2)
        return 0xFF

    def write_wave_ram(self, address, value):
        """Write wave RAM; while playing only the byte being read is reachable."""
        channel = self.channel3
        if not channel.enabled:
            channel.write_ram(address, value)
        elif channel.period.reloaded:
            channel.write_ram(channel.wave_position // 2, value)

    def write_ch1_sweep_settings(self, value):
        """Write NR10: frequency sweep settings."""
        if self.enabled:
            self.channel1.update_sweep_settings(value)

    def write_ch1_length_settings(self, value):
        """Write NR11: duty and initial length."""
        self.channel1.length.initial_settings = value if self.enabled else value & 0x3F
        self.channel1.length.initialize_timer()

    def write_ch1_period_low(self, value):
        """Write NR13: period low bits."""
        if self.enabled:
            self.channel1.period.low = value

    def write_ch2_length_settings(self, value):
        """Write NR21: duty and initial length."""
        self.channel2.length.initial_settings = value if self.enabled else value & 0x3F
        self.channel2.length.initialize_timer()

    def write_ch2_period_low(self, value):
        """Write NR23: period low bits."""
        if self.enabled:
            self.channel2.period.low = value

    def write_ch3_length_settings(self, value):
        """Write NR31: initial length."""
        self.channel3.length.initial_settings = value
        self.channel3.length.initialize_wave_channel_timer()

    def write_ch3_period_low(self, value):
        """Write NR33: period low bits."""
        if self.enabled:
            self.channel3.period.low = value

    def write_ch3_volume(self, value):
        """Write NR32: output level."""
        if self.enabled:
            self.channel3.volume = value

    def write_ch4_length_settings(self, value):
        """Write NR41: initial length."""
        self.channel4.length.initial_settings = value
        self.channel4.length.initialize_timer()

    def write_ch4_polynomial(self, value):
        """Write NR43: clock shift, width and divisor."""
        if self.enabled:
            self.channel4.polynomial = value

    def write_master_volume(self, value):
        """Write NR50: left and right master volume."""
        if self.enabled:
            self.master_volume = value

    def write_sound_panning(self, value):
        """Write NR51: per-channel left and right panning."""
        if self.enabled:
            self.sound_panning = value