"""Models of PlayStation hardware devices: RAM, timers, joypad port, SPU and GPU."""

__version__ = "0.1.0"
__all__ = ["memory", "timers", "joypad", "spu", "gpu_commands", "gpu"]