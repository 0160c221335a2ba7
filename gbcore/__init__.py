"""Game Boy and Game Boy Color emulation components: audio unit, CPU helpers, interrupts and VRAM DMA."""

__version__ = "0.1.0"