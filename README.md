# gbcore

Building blocks for a Game Boy / Game Boy Color emulator: the audio
processing unit (two pulse channels, a wave channel and a noise channel,
with stereo mixing), the SM83 CPU's registers, flags, bus timing and
instruction helpers, interrupt dispatch and the colour model's VRAM DMA.

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Audio

`gbcore.apu.Apu` holds the four channels and the registers that control
them. Register writes go through its `write_*` methods (for example
`write_ch1_period_high`, `write_master_volume`, `write_sound_panning`),
reads through `read_audio_master_control` and `read_wave_ram`.

Call `Apu.step(divider, double_speed, in_color_bios)` once per machine
cycle. `divider` is the current value of the timer's divider register;
the frame sequencer (envelope, length and sweep ticks) advances each time
bit 4 of it falls from 1 to 0. While `in_color_bios` is true no samples
are produced.

```python
from gbcore.apu import Apu

apu = Apu()
apu.write_audio_master_control(0x80)   # power on
apu.write_master_volume(0x77)
apu.write_sound_panning(0xFF)
apu.write_ch1_envelope_settings(0xF0)
apu.write_ch1_length_settings(0x80)
apu.write_ch1_period_low(0x00)
apu.write_ch1_period_high(0x87)        # trigger channel 1

machine_cycles = 0
while not apu.audio_buffers_full():
    divider = (machine_cycles // 64) & 0xFF   # DIV ticks every 64 machine cycles
    apu.step(divider, False, False)
    machine_cycles += 1

left = list(apu.left_sample_queue)
right = list(apu.right_sample_queue)
apu.clear_audio_buffers()
```

At normal speed one stereo sample is appended to `left_sample_queue` and
`right_sample_queue` every 22 machine cycles (about 48 kHz). Samples are
floats; each channel's output is averaged with a weighting over the cycles
since the last sample, panned and scaled by the master volume.
`audio_buffers_full` reports when both queues hold 512 samples.

Writing `write_audio_master_control` with bit 7 clear powers the unit off
and resets it, keeping the channels' length timers, the wave RAM and the
wave position.

The channels can also be used on their own: `gbcore.pulse.PulseChannel`
(with its `Sweep`), `gbcore.wave.WaveChannel` and
`gbcore.noise.NoiseChannel`, built from `gbcore.envelope.Envelope`,
`gbcore.length.Length` and `gbcore.period.Period`. `gbcore.mixing` holds
the bit helpers and the `calculate_left_stereo_sample` /
`calculate_right_stereo_sample` mixing functions.

## CPU

`gbcore.cpu.Cpu` keeps the registers and the clock and talks to memory
through a `gbcore.cpu.Bus`. The default `Bus` is a flat 64 KiB
`bytearray` whose `sync` only counts machine cycles; subclass it and
provide `read_byte`, `write_byte` and `sync` (called once per machine
cycle so the rest of the machine can catch up) to attach real hardware.

Every bus access through `Cpu.read_byte` / `Cpu.write_byte` costs one
machine cycle. With `processor_test_mode` set, each access is recorded as
a `BusActivityEntry` in `opcode_bus_activity`, with `None` for cycles
without bus activity. Setting `double_speed` makes a machine cycle two
clock cycles instead of four.

Instruction behaviour lives in `gbcore.alu`, `gbcore.bitops`,
`gbcore.loads` and `gbcore.jumps`, each a set of functions taking the
`Cpu`:

```python
from gbcore import alu
from gbcore.cpu import Bus, Cpu, Flag, Register

class Ram(Bus):
    def __init__(self):
        self.memory = bytearray(0x10000)

    def read_byte(self, address):
        return self.memory[address]

    def write_byte(self, address, value):
        self.memory[address] = value

    def sync(self):
        pass

cpu = Cpu(Ram())
cpu.write_register(Register.A, 0x0F)
alu.add(cpu, Register.A, 0x01)
assert cpu.read_register(Register.A) == 0x10
assert cpu.is_flag_set(Flag.H)
```

Register pairs are `RegisterPair.AF`, `BC`, `DE` and `HL`, read and
written with `Cpu.read_pair` / `Cpu.write_pair`.
`gbcore.cpu.handle_illegal_opcode` raises
`gbcore.cpu.IllegalOpcodeError`.

## Interrupts and VRAM DMA

`gbcore.interrupts.InterruptRegisters` holds IE (`enabled`) and IF
(`flags`) and picks the highest-priority pending `InterruptType`;
`service_interrupt(cpu, registers)` clears its flag, disables interrupts,
spends two machine cycles and jumps to the service routine, returning
whether an interrupt was serviced.

`gbcore.hdma.Hdma` implements the HDMA1–HDMA5 registers. It copies over
its `cpu`'s bus, 16 bytes per block: general-purpose transfers run to
completion in one `step`, H-Blank transfers move one block per
`set_hblank_started(True)`. With `cgb=False` it ignores writes and reads
HDMA5 as `0xFF`.

## What this package does not do

It is a set of components, not a runnable emulator. There is no opcode
decoder or fetch–execute loop, no timers, no picture processing or video
RAM model, no memory map, cartridge or ROM loading, no joypad or serial
link, and no audio output or display: the sample queues and the bus are
left for the caller to connect.