import pytest

from gbcore.envelope import Envelope
from gbcore.length import Length
from gbcore.noise import NoiseChannel


def _enabled_channel():
    return NoiseChannel(enabled=True, dac_enabled=True)


def test_dac_output_when_amplitude_is_zero():
    channel = _enabled_channel()
    channel.lfsr = 0xFFFE
    channel.envelope.current_volume = 0xA
    assert channel.digital_output() == 0.0


def test_dac_output_when_amplitude_is_one():
    channel = _enabled_channel()
    channel.lfsr = 0xFFFF
    channel.envelope.current_volume = 0xA
    assert channel.digital_output() == 10.0


def test_no_audio_output_if_channel_is_disabled():
    channel = NoiseChannel()
    channel.lfsr = 0
    channel.envelope.current_volume = 0xA
    assert channel.digital_output() == 7.5


@pytest.mark.parametrize(
    "polynomial, expected",
    [(0b00000000, 8), (0b00110110, 768), (0b00000001, 16), (0b00010000, 16)],
)
def test_calculate_period_divider(polynomial, expected):
    channel = NoiseChannel(polynomial=polynomial)
    assert channel.calculate_period_divider() == expected


def test_does_not_reload_divider_with_only_four_cycles():
    channel = _enabled_channel()
    channel.period_divider = 742
    channel.step(4)
    assert channel.period_divider == 742
    assert channel.instruction_cycles == 4


def test_reloads_divider_once_it_expires():
    channel = _enabled_channel()
    channel.period_divider = 1
    channel.polynomial = 0b00110110
    for _ in range(4):
        channel.step(4)
    assert channel.period_divider == 768


def test_next_lfsr_value():
    channel = _enabled_channel()
    channel.period_divider = 1
    channel.polynomial = 0b00110110
    channel.lfsr = 0b0010010000101100
    for _ in range(4):
        channel.step(4)
    assert channel.lfsr == 0b0101001000010110


def test_next_lfsr_value_in_width_mode():
    channel = _enabled_channel()
    channel.period_divider = 1
    channel.polynomial = 0b00111110
    channel.lfsr = 0b0010010000101100
    for _ in range(4):
        channel.step(4)
    assert channel.lfsr == 0b0101001001010110


def test_trigger_enables_channel_and_reloads_state():
    channel = NoiseChannel(dac_enabled=True, polynomial=0b00110110, lfsr=0x1234)
    channel.envelope.initial_settings = 0b10100101
    channel.trigger()
    assert channel.enabled is True
    assert channel.lfsr == 0
    assert channel.period_divider == 768
    assert channel.length.timer == 64
    assert channel.envelope.current_volume == 0b1010
    assert channel.envelope.timer == 0b101


def test_trigger_without_dac_keeps_channel_off():
    channel = NoiseChannel()
    channel.trigger()
    assert channel.enabled is False


def test_should_trigger_reads_bit_seven():
    assert NoiseChannel(control=0b10000000).should_trigger() is True
    assert NoiseChannel(control=0b01111111).should_trigger() is False


def test_step_length_decrements_when_enabled():
    channel = _enabled_channel()
    channel.length.timer = 6
    channel.control = 0b11000000
    channel.step_length()
    assert channel.length.timer == 5
    assert channel.enabled is True


def test_step_length_disables_at_zero():
    channel = _enabled_channel()
    channel.length.timer = 1
    channel.control = 0b01000000
    channel.step_length()
    assert channel.length.timer == 0
    assert channel.enabled is False


def test_step_length_ignored_when_length_disabled():
    channel = _enabled_channel()
    channel.length.timer = 6
    channel.step_length()
    assert channel.length.timer == 6


def test_step_envelope_only_when_enabled():
    channel = NoiseChannel(envelope=Envelope(initial_settings=0b10100101, current_volume=10, timer=5))
    channel.step_envelope()
    assert channel.envelope.timer == 5
    channel.enabled = True
    channel.step_envelope()
    assert channel.envelope.timer == 4


def test_should_clock_length_on_enable():
    channel = NoiseChannel(control=0b01000000)
    assert channel.should_clock_length_on_enable(0) is True
    assert channel.should_clock_length_on_enable(0b01000000) is False


def test_should_clock_length_on_trigger():
    channel = NoiseChannel(control=0b01000000, length=Length(timer=64))
    assert channel.should_clock_length_on_trigger() is True
    channel.length.timer = 10
    assert channel.should_clock_length_on_trigger() is False


def test_reset_keeps_length_timer_only():
    channel = NoiseChannel(enabled=True, dac_enabled=True, polynomial=3,
                           length=Length(initial_settings=12, timer=40))
    fresh = channel.reset()
    assert fresh.length == Length(initial_settings=0, timer=40)
    assert fresh.enabled is False
    assert fresh.polynomial == 0