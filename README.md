# psxhw

Models of PlayStation hardware devices. Each device is driven through the
register reads and writes a CPU would issue, with addresses given as offsets
into the device's own register block.

## Modules

- `psxhw.memory`
  - `read_sized(buffer, addr, size)` and `write_sized(buffer, addr, value, size)`:
    little-endian access of 1, 2 or 4 bytes. Other sizes raise `ValueError`;
    an access that runs past the buffer raises `IndexError`. Writes truncate
    the value to the access size.
  - `Ram`: 2 MiB of zero-initialised memory with `read(addr, size)` and
    `write(addr, value, size)`.
- `psxhw.timers`
  - `Timers`: the three root counters, 16 bytes of registers each (current
    value at `+0x0`, mode at `+0x4`, target at `+0x8`). `read` and `write`
    take the bus's total cycle count, from which counters advance lazily.
    Reading the mode returns it and clears the "reached target" and
    "reached wrap" flags. Accesses to a counter beyond the third read as 0
    and are ignored on write.
  - `Timer` and `CounterStatus`: one counter and its mode register, with
    the mode bits exposed as properties. Counter 1 counts at about 1/2200 of
    the cycle rate when its clock source is 1 or 3.
- `psxhw.joypad`
  - `JoypadMemorycard`: the controller serial port. Once transmission is
    enabled through the control register, it answers the ID request `0x42`
    with `0x41`, then `0x5A`, two button bytes of `0xFF` (nothing pressed)
    and `0x80` for each analog byte.
  - `ControllerState`: the steps of that exchange.
  - `JoypadProtocolError`: raised for a byte the port does not expect in its
    initial state, or a write to a register it does not have.
- `psxhw.spu`
  - `Spu`: 1 KiB of register space and 512 KiB of sound RAM. Register writes
    are stored; the transfer address (`0x1A6`) and transfer FIFO (`0x1A8`)
    registers write halfwords into sound RAM, and SPUCNT (`0x1AA`) is
    mirrored in the low six bits of SPUSTAT (`0x1AE`).
- `psxhw.gpu_commands`
  - The commands the GPU passes on: `DrawGouraudTriangle`,
    `DrawTexturedQuad`, `WriteToVram`, `SetDrawingArea`, `SetDisplayArea`,
    built from `Color`, `Vertex`, `PrimitiveVertex` and `Uv`.
  - Helpers for GP0 words: `parameter_words(opcode)`, `sign_extend_11(value)`,
    `halfwords_from_words(words)`, and `POLYLINE_TERMINATOR`.
- `psxhw.gpu`
  - `Gpu`: GP0 writes at offset 0, GP1 writes at offset 4, GPUSTAT read at
    offset 4. Completed GP0 commands and display changes are handed to the
    `sink` callable given to the constructor. `vblank()` raises the IRQ bit
    and, in 480-line mode, flips the even/odd field bit.
  - `GpuStat`: the status register, with its fields as attributes.
  - `GpuError`: raised for reads or writes at an offset other than 0 or 4,
    and for unknown GP1 opcodes.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Example

```python
from psxhw.memory import Ram
from psxhw.gpu import Gpu

ram = Ram()
ram.write(0x100, 0xDEADBEEF, 4)
assert ram.read(0x100, 2) == 0xBEEF

commands = []
gpu = Gpu(commands.append)

# GP0(20h): flat triangle, colour then three vertices
for word in (0x20FF0000, 0x00000000, 0x00000010, 0x00100000):
    gpu.write(0, word, 4)

print(commands[0])          # a DrawGouraudTriangle with three vertices
print(hex(gpu.read(4, 4)))  # GPUSTAT
```

The sink is any callable that takes a single command object: a list's
`append`, a queue's `put` or a renderer's own method.

## What the GPU draws

Flat and shaded triangles and quads (`0x20`, `0x28`, `0x30`, `0x38`), the
blended textured quad (`0x2C`), the single-dot rectangle (`0x68`), CPU-to-VRAM
copies (`0xA0`–`0xBF`) and the drawing-area commands (`0xE3`, `0xE4`) produce
commands for the sink. The draw mode (`0xE1`) and drawing offset (`0xE5`)
are stored on the `Gpu`. Other recognised primitives are only logged at
INFO level on the `psxhw.gpu` logger; the rest are ignored.

## What this package does not do

It holds device models only. There is no CPU, no bus tying the devices
together, no DMA, CD-ROM or interrupt controller, no BIOS or executable
loading, no renderer or window, and no command to run. Putting the devices
to work, and drawing what the GPU sends to its sink, is left to the program
that uses them.