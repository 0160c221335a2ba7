"""Bit helpers and stereo mixing for the audio channels."""

_LENGTH_ENABLED_INDEX = 6

_LEFT_PANNING_INDICES = (4, 5, 6, 7)
_RIGHT_PANNING_INDICES = (0, 1, 2, 3)


def is_bit_set(value, index):
    """Return True when bit ``index`` of ``value`` is 1."""
    return (value >> index) & 1 == 1


def get_bit(value, index):
    """Return bit ``index`` of ``value`` as 0 or 1."""
    return (value >> index) & 1


def bounded_wrapping_add(value, max_value):
    """Add one to ``value``, wrapping to zero once it passes ``max_value``."""
    new_value = value + 1
    return 0 if new_value > max_value else new_value


def as_dac_output(dac_input):
    """Map a digital level in 0..15 to an analog level in -1.0..1.0."""
    return dac_input / 7.5 - 1.0


def length_enabled(register_value):
    """Return True when the length-enable bit of a channel register is set."""
    return is_bit_set(register_value, _LENGTH_ENABLED_INDEX)


def _mix(sound_panning, indices, master_volume, outputs):
    panned = [
        output if is_bit_set(sound_panning, index) else 0.0
        for index, output in zip(indices, outputs)
    ]
    sample = sum(panned) / 4.0
    return sample * (master_volume + 1.0) / 8.0


def calculate_left_stereo_sample(sound_panning, left_master_volume, channel1_output,
                                 channel2_output, channel3_output, channel4_output):
    """Mix the four channel outputs into one left-hand sample."""
    outputs = (channel1_output, channel2_output, channel3_output, channel4_output)
    return _mix(sound_panning, _LEFT_PANNING_INDICES, left_master_volume, outputs)


def calculate_right_stereo_sample(sound_panning, right_master_volume, channel1_output,
                                  channel2_output, channel3_output, channel4_output):
    """Mix the four channel outputs into one right-hand sample."""
    outputs = (channel1_output, channel2_output, channel3_output, channel4_output)
    return _mix(sound_panning, _RIGHT_PANNING_INDICES, right_master_volume, outputs)