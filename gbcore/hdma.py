"""VRAM DMA transfers of the colour model, in general-purpose or HBlank mode."""

from dataclasses import dataclass, field
from enum import Enum

from gbcore.cpu import Cpu
from gbcore.mixing import is_bit_set

_VRAM_TRANSFER_INDEX = 7
_BLOCK_SIZE = 16
_VRAM_BASE = 0x8000


class VramTransferMode(Enum):
    """How a VRAM DMA transfer is paced."""

    GENERAL_PURPOSE = "general_purpose"
    HBLANK = "hblank"


@dataclass
class Hdma:
    """VRAM DMA registers and transfer progress, copying over ``cpu``'s bus.

    ``cgb`` says whether the machine is a colour model; otherwise the unit is inert.
    """

    cpu: Cpu = field(default_factory=Cpu)
    cgb: bool = True
    hdma1: int = 0
    hdma2: int = 0
    hdma3: int = 0
    hdma4: int = 0
    offset: int = 0
    transfer_length: int = 0
    transfer_mode: VramTransferMode = VramTransferMode.GENERAL_PURPOSE
    in_progress: bool = False
    completed: bool = True
    hblank_started: bool = False

    def write_hdma1(self, value):
        """Write the source high byte."""
        if self.cgb:
            self.hdma1 = value

    def write_hdma2(self, value):
        """Write the source low byte."""
        if self.cgb:
            self.hdma2 = value

    def write_hdma3(self, value):
        """Write the destination high byte."""
        if self.cgb:
            self.hdma3 = value

    def write_hdma4(self, value):
        """Write the destination low byte."""
        if self.cgb:
            self.hdma4 = value

    def write_hdma5(self, value):
        """Start a transfer, or stop an HBlank transfer in progress."""
        if not self.cgb:
            return
        transfer_bit_set = is_bit_set(value, _VRAM_TRANSFER_INDEX)
        if self.in_progress and not transfer_bit_set:
            self.in_progress = False
            return
        self.transfer_length = value & 0b01111111
        self.transfer_mode = (
            VramTransferMode.HBLANK if transfer_bit_set else VramTransferMode.GENERAL_PURPOSE
        )
        self.in_progress = True
        self.completed = False

    def read_hdma5(self):
        """Read the remaining length and the transfer status bit."""
        if not self.cgb:
            return 0xFF
        if self.in_progress:
            return self.transfer_length & 0b01111111
        if self.completed:
            return 0xFF
        return 0b10000000 | (self.transfer_length & 0b01111111)

    def source(self):
        """Return the transfer source address."""
        return (self.hdma1 << 8) | (self.hdma2 & 0b11110000)

    def destination(self):
        """Return the transfer destination address in video RAM."""
        offset = ((self.hdma3 & 0b00011111) << 8) | (self.hdma4 & 0b11110000)
        return _VRAM_BASE + offset

    def set_hblank_started(self, started):
        """Record the start of an HBlank period while a transfer runs."""
        if self.in_progress:
            self.hblank_started = started

    def _transfer_block(self, source, destination):
        bus = self.cpu.bus
        for _ in range(_BLOCK_SIZE // 2):
            for _ in range(2):
                byte = bus.read_byte((source + self.offset) & 0xFFFF)
                bus.write_byte((destination + self.offset) & 0xFFFF, byte)
                self.offset += 1
            # Two bytes move per machine cycle, or per two fast cycles at double speed.
            self.cpu.step_machine_cycles(2 if self.cpu.double_speed else 1)

        if self.transfer_length == 0:
            self.completed = True
            self.in_progress = False
            self.offset = 0
        else:
            self.transfer_length -= 1

    def step(self):
        """Move data for the active transfer, as its mode allows."""
        if not (self.cgb and self.in_progress):
            return
        source = self.source()
        destination = self.destination()
        if self.transfer_mode is VramTransferMode.HBLANK:
            if self.hblank_started:
                self._transfer_block(source, destination)
                self.hblank_started = False
        else:
            while not self.completed:
                self._transfer_block(source, destination)