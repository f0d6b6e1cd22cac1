"""
CHIP-8 CPU
==========

Fetch/decode/execute core for the CHIP-8 virtual machine.

The CPU owns one instance of each component:
- Memory: 4 KiB with the hex glyph table at $000
- Registers: V0-VF, I, PC, SP, ring stack, delay and sound timers
- Display: 64x32 framebuffer
- Keypad: 16 keys with release tracking

The host drives it with tick(), once per frame. Each tick executes a fixed
number of instructions; each instruction advances PC by 2 unless its handler
took control of PC. After every instruction the sound timer is checked and
the beep handler is started or stopped when its state changes.

Instruction Set (35 instructions):
    00E0 CLS            00EE RET            0NNN SYS  (ignored)
    1NNN JP   nnn       2NNN CALL nnn       3XKK SE   Vx, kk
    4XKK SNE  Vx, kk    5XY0 SE   Vx, Vy    6XKK LD   Vx, kk
    7XKK ADD  Vx, kk    8XY0 LD   Vx, Vy    8XY1 OR   Vx, Vy
    8XY2 AND  Vx, Vy    8XY3 XOR  Vx, Vy    8XY4 ADD  Vx, Vy
    8XY5 SUB  Vx, Vy    8XY6 SHR  Vx, Vy    8XY7 SUBN Vx, Vy
    8XYE SHL  Vx, Vy    9XY0 SNE  Vx, Vy    ANNN LD   I, nnn
    BNNN JP   V0, nnn   CXKK RND  Vx, kk    DXYN DRW  Vx, Vy, n
    EX9E SKP  Vx        EXA1 SKNP Vx        FX07 LD   Vx, DT
    FX0A LD   Vx, K     FX15 LD   DT, Vx    FX18 LD   ST, Vx
    FX1E ADD  I, Vx     FX29 LD   F, Vx     FX33 LD   B, Vx
    FX55 LD   [I], Vx   FX65 LD   Vx, [I]

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import dataclasses
import logging
import random
from enum import Enum, auto
from typing import Optional

from ..errors import AddressError, ExecutionError, InvalidOpcodeError
from .beep import BeepHandler, NullBeep
from .breakpoints import BreakpointManager
from .clock import Clock, default_clock
from .display import Display
from .instruction import Instruction
from .keypad import Keypad
from .memory import FONT_ADDRESS, FONT_GLYPHS, Memory, glyph_address, is_valid_address
from .quirks import MachineConfig, Quirks
from .registers import Registers

logger = logging.getLogger(__name__)

# First address past the built-in glyph table.
GLYPH_TABLE_END = FONT_ADDRESS + len(FONT_GLYPHS)


class Flow(Enum):
    """
    What an instruction handler did with the program counter.

    NEXT: advance PC by 2 (the common case)
    SKIP: advance PC by 4 (conditional skip taken)
    JUMP: handler already set PC
    WAIT: leave PC on this instruction so it runs again next tick
    """
    NEXT = auto()
    SKIP = auto()
    JUMP = auto()
    WAIT = auto()


class CPU:
    """
    CHIP-8 interpreter with quirk configuration and debugging hooks.

    External dependencies are injected so tests can control them:
    - clock: seconds source for timers and draw pacing
    - rng: random source for CXKK
    - beep: sound output

    Example:
        >>> cpu = CPU(MachineConfig(instructions_per_tick=1))
        >>> cpu.load_program(bytes([0x60, 0x12]))
        >>> cpu.tick()
        >>> hex(cpu.registers.v[0]), hex(cpu.registers.pc)
        ('0x12', '0x202')
    """

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        beep: Optional[BeepHandler] = None,
        clock: Clock = default_clock,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize an empty machine (no program loaded).

        Args:
            config: Machine configuration. Defaults to MachineConfig().
            beep: Sound output handler. Defaults to NullBeep.
            clock: Callable returning seconds. Defaults to time.monotonic.
            rng: Random source for RND. Defaults to an unseeded Random.
        """
        self.config = config or MachineConfig()
        self._quirks = self.config.quirks
        self._instructions_per_tick = self.config.instructions_per_tick
        self._min_draw_interval = self.config.min_draw_interval
        self._origin = self.config.program_origin

        self._clock = clock
        self._rng = rng or random.Random()
        self._beep: BeepHandler = beep or NullBeep()
        self._sound_enabled = True
        self._beeping = False

        self.breakpoints = BreakpointManager()

        self._program: Optional[bytes] = None
        self._halted = False
        self._last_draw: Optional[float] = None
        self._resume_pc: Optional[int] = None
        self.instruction_count = 0

        self._install(Memory(b"", self._origin))

    # =========================================================================
    # Components
    # =========================================================================

    def _install(self, memory: Memory) -> None:
        """Replace all four components with fresh instances."""
        self._memory = memory
        self._registers = Registers(memory.origin, self._clock)
        self._display = Display()
        self._keypad = Keypad(self._quirks.consume_release_on_query)
        self._last_draw = None
        self._resume_pc = None
        self.instruction_count = 0

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def registers(self) -> Registers:
        return self._registers

    @property
    def display(self) -> Display:
        return self._display

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_program(self, data: bytes, origin: Optional[int] = None) -> None:
        """
        Load a program and reset the machine.

        Memory, registers, display and keypad are all recreated. Any halt
        state is cleared.

        Args:
            data: Program image
            origin: Load address and initial PC. Defaults to the configured
                program origin ($200).

        Raises:
            ProgramLoadError: If the program does not fit. The current
                machine state is left untouched.
        """
        origin = self.config.program_origin if origin is None else origin
        data = bytes(data)
        memory = Memory(data, origin)

        self._program = data
        self._origin = origin
        self._install(memory)
        self._halted = False
        self._silence()
        self.breakpoints.clear_last_event()
        logger.debug(f"Program loaded: {len(data)} bytes at ${origin:03X}")

    def unload(self) -> None:
        """Discard the program and reset to an empty machine."""
        self._program = None
        self._origin = self.config.program_origin
        self._install(Memory(b"", self._origin))
        self._halted = False
        self._silence()
        self.breakpoints.clear_last_event()
        logger.debug("Program unloaded")

    def restart(self) -> None:
        """Reload the current program from its original image."""
        if self._program is None:
            raise RuntimeError("No program loaded")
        self.load_program(self._program, self._origin)

    @property
    def is_loaded(self) -> bool:
        """True if a program is loaded."""
        return self._program is not None

    @property
    def origin(self) -> int:
        """Load address of the current program."""
        return self._origin

    # =========================================================================
    # Execution Control
    # =========================================================================

    @property
    def is_halted(self) -> bool:
        return self._halted

    def halt(self) -> None:
        """Stop tick() from executing instructions. Silences the beep."""
        if not self._halted:
            logger.debug(f"Halted at ${self._registers.pc:03X}")
        self._halted = True
        self._silence()

    def resume(self) -> None:
        """
        Allow tick() to execute again.

        The instruction at the current PC runs before breakpoints are
        checked, so resuming from a breakpoint makes progress.
        """
        if self._halted:
            logger.debug(f"Resumed at ${self._registers.pc:03X}")
        self._halted = False
        self._resume_pc = self._registers.pc

    def toggle_halt(self) -> bool:
        """
        Flip between halted and running.

        Returns:
            New halted state
        """
        if self._halted:
            self.resume()
        else:
            self.halt()
        return self._halted

    @property
    def instructions_per_tick(self) -> int:
        return self._instructions_per_tick

    @instructions_per_tick.setter
    def instructions_per_tick(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"instructions_per_tick must be >= 0, got {value}")
        self._instructions_per_tick = value

    @property
    def min_draw_interval(self) -> float:
        """Minimum seconds between performed draws (0 disables pacing)."""
        return self._min_draw_interval

    @min_draw_interval.setter
    def min_draw_interval(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"min_draw_interval must be >= 0, got {value}")
        self._min_draw_interval = value

    def tick(self) -> None:
        """
        Run one frame's worth of instructions.

        Does nothing while halted or with no program loaded. Stops early when
        a breakpoint is hit (the CPU halts) or when FX0A is waiting for a
        key release. A breakpoint on a waiting FX0A fires once; after
        resume() the wait continues across ticks until a key is released.

        Raises:
            ExecutionError: On an invalid opcode or address. The CPU is
                halted before the error propagates.
        """
        if self._halted or self._program is None:
            return

        for _ in range(self._instructions_per_tick):
            pc = self._registers.pc
            if not self.breakpoints.is_empty and pc != self._resume_pc:
                if not self.breakpoints.check_instruction(self, pc):
                    logger.debug(f"Break: {self.breakpoints.last_event}")
                    self.halt()
                    return
            self._resume_pc = None

            if self.execute_one() is Flow.WAIT:
                # A resumed FX0A keeps waiting without re-hitting its breakpoint.
                self._resume_pc = pc
                break

    def step(self) -> Optional[Flow]:
        """
        Execute exactly one instruction, even while halted.

        Returns:
            Flow of the executed instruction, or None if no program is loaded
        """
        if self._program is None:
            return None
        return self.execute_one()

    def execute_one(self) -> Flow:
        """
        Fetch, decode and execute the instruction at PC.

        Returns:
            How the instruction affected the program counter

        Raises:
            InvalidOpcodeError: If the word at PC is not an instruction
            AddressError: If the instruction touches memory outside $000-$FFF
        """
        regs = self._registers
        pc = regs.pc

        try:
            inst = Instruction(self._fetch(pc))
            flow = self._execute(inst)
        except ExecutionError as e:
            self._halted = True
            self._silence()
            self.breakpoints.record_error(pc, str(e))
            logger.error(f"Execution halted: {e}")
            raise

        match flow:
            case Flow.NEXT:
                regs.pc = pc + 2
            case Flow.SKIP:
                regs.pc = pc + 4

        self.instruction_count += 1
        self._update_beep()
        return flow

    # =========================================================================
    # Memory Access
    # =========================================================================

    def _check_address(self, address: int) -> int:
        """Validate an effective address before it reaches Memory."""
        if not is_valid_address(address):
            raise AddressError(address, pc=self._registers.pc)
        return address

    def _check_range(self, address: int, count: int) -> None:
        if count > 0:
            self._check_address(address)
            self._check_address(address + count - 1)

    def _check_writable(self, address: int, count: int) -> None:
        """Validate a store of count bytes at address; the glyph table is read-only."""
        self._check_range(address, count)
        if count > 0 and address < GLYPH_TABLE_END:
            raise AddressError(
                address, pc=self._registers.pc, reason="is in the read-only glyph table"
            )

    def _fetch(self, pc: int) -> int:
        """Fetch the big-endian instruction word at pc."""
        self._check_range(pc, 2)
        return self._memory.read_word(pc)

    # =========================================================================
    # Instruction Execution
    # =========================================================================

    def _execute(self, inst: Instruction) -> Flow:
        """
        Execute a single decoded instruction.

        Args:
            inst: The decoded instruction

        Returns:
            Flow signal for the program counter
        """
        regs = self._registers
        v = regs.v
        x, y, kk, nnn = inst.x, inst.y, inst.kk, inst.nnn

        match inst.parts:
            # ============================================
            # System and Flow Control (0-2)
            # ============================================
            case (0x0, 0x0, 0xE, 0x0):  # CLS
                self._display.clear()
                return Flow.NEXT
            case (0x0, 0x0, 0xE, 0xE):  # RET
                regs.pc = regs.pop() + 2
                return Flow.JUMP
            case (0x0, _, _, _):  # SYS nnn (machine code call, ignored)
                return Flow.NEXT
            case (0x1, _, _, _):  # JP nnn
                regs.pc = nnn
                return Flow.JUMP
            case (0x2, _, _, _):  # CALL nnn
                regs.push(regs.pc)
                regs.pc = nnn
                return Flow.JUMP

            # ============================================
            # Conditional Skips (3-5, 9)
            # ============================================
            case (0x3, _, _, _):  # SE Vx, kk
                return Flow.SKIP if v[x] == kk else Flow.NEXT
            case (0x4, _, _, _):  # SNE Vx, kk
                return Flow.SKIP if v[x] != kk else Flow.NEXT
            case (0x5, _, _, 0x0):  # SE Vx, Vy
                return Flow.SKIP if v[x] == v[y] else Flow.NEXT
            case (0x9, _, _, 0x0):  # SNE Vx, Vy
                return Flow.SKIP if v[x] != v[y] else Flow.NEXT

            # ============================================
            # Immediate Loads (6-7)
            # ============================================
            case (0x6, _, _, _):  # LD Vx, kk
                v[x] = kk
                return Flow.NEXT
            case (0x7, _, _, _):  # ADD Vx, kk (VF untouched)
                v[x] = (v[x] + kk) & 0xFF
                return Flow.NEXT

            # ============================================
            # Register ALU (8XYn)
            # ============================================
            case (0x8, _, _, 0x0):  # LD Vx, Vy
                v[x] = v[y]
                return Flow.NEXT
            case (0x8, _, _, 0x1):  # OR Vx, Vy
                v[x] |= v[y]
                self._logic_flag()
                return Flow.NEXT
            case (0x8, _, _, 0x2):  # AND Vx, Vy
                v[x] &= v[y]
                self._logic_flag()
                return Flow.NEXT
            case (0x8, _, _, 0x3):  # XOR Vx, Vy
                v[x] ^= v[y]
                self._logic_flag()
                return Flow.NEXT
            case (0x8, _, _, 0x4):  # ADD Vx, Vy
                total = v[x] + v[y]
                v[x] = total & 0xFF
                regs.flag = 1 if total > 0xFF else 0
                return Flow.NEXT
            case (0x8, _, _, 0x5):  # SUB Vx, Vy
                vx, vy = v[x], v[y]
                v[x] = (vx - vy) & 0xFF
                regs.flag = 1 if vx >= vy else 0
                return Flow.NEXT
            case (0x8, _, _, 0x6):  # SHR Vx {, Vy}
                src = self._shift_source(x, y)
                v[x] = src >> 1
                regs.flag = src & 0x01
                return Flow.NEXT
            case (0x8, _, _, 0x7):  # SUBN Vx, Vy
                vx, vy = v[x], v[y]
                v[x] = (vy - vx) & 0xFF
                regs.flag = 1 if vy >= vx else 0
                return Flow.NEXT
            case (0x8, _, _, 0xE):  # SHL Vx {, Vy}
                src = self._shift_source(x, y)
                v[x] = (src << 1) & 0xFF
                regs.flag = (src >> 7) & 0x01
                return Flow.NEXT

            # ============================================
            # Index, Jump, Random, Draw (A-D)
            # ============================================
            case (0xA, _, _, _):  # LD I, nnn
                regs.i = nnn
                return Flow.NEXT
            case (0xB, _, _, _):  # JP V0, nnn / JP Vx, kk
                if self._quirks.jump_uses_vx:
                    regs.pc = kk + v[x]
                else:
                    regs.pc = nnn + v[0]
                return Flow.JUMP
            case (0xC, _, _, _):  # RND Vx, kk
                v[x] = self._rng.randrange(256) & kk
                return Flow.NEXT
            case (0xD, _, _, _):  # DRW Vx, Vy, n
                self._draw(v[x], v[y], inst.n)
                return Flow.NEXT

            # ============================================
            # Keypad (E)
            # ============================================
            case (0xE, _, 0x9, 0xE):  # SKP Vx
                down = self._keypad.get_key_state(v[x] & 0xF)
                return Flow.SKIP if down else Flow.NEXT
            case (0xE, _, 0xA, 0x1):  # SKNP Vx
                down = self._keypad.get_key_state(v[x] & 0xF)
                return Flow.NEXT if down else Flow.SKIP

            # ============================================
            # Timers, Input and Memory Transfers (FXkk)
            # ============================================
            case (0xF, _, 0x0, 0x7):  # LD Vx, DT
                v[x] = regs.delay_timer.read()
                return Flow.NEXT
            case (0xF, _, 0x0, 0xA):  # LD Vx, K
                key = self._keypad.get_released_key()
                if key is None:
                    return Flow.WAIT
                v[x] = key
                return Flow.NEXT
            case (0xF, _, 0x1, 0x5):  # LD DT, Vx
                regs.delay_timer.write(v[x])
                return Flow.NEXT
            case (0xF, _, 0x1, 0x8):  # LD ST, Vx
                regs.sound_timer.write(v[x])
                return Flow.NEXT
            case (0xF, _, 0x1, 0xE):  # ADD I, Vx
                regs.i = regs.i + v[x]
                return Flow.NEXT
            case (0xF, _, 0x2, 0x9):  # LD F, Vx
                regs.i = glyph_address(v[x])
                return Flow.NEXT
            case (0xF, _, 0x3, 0x3):  # LD B, Vx
                self._store_bcd(v[x])
                return Flow.NEXT
            case (0xF, _, 0x5, 0x5):  # LD [I], Vx
                self._store_registers(x)
                return Flow.NEXT
            case (0xF, _, 0x6, 0x5):  # LD Vx, [I]
                self._load_registers(x)
                return Flow.NEXT

            case _:
                raise InvalidOpcodeError(inst.word, regs.pc)

    # ========================================
    # Instruction Helpers
    # ========================================

    def _logic_flag(self) -> None:
        if self._quirks.logic_resets_flag:
            self._registers.flag = 0

    def _shift_source(self, x: int, y: int) -> int:
        v = self._registers.v
        return v[y] if self._quirks.shift_uses_vy else v[x]

    def _draw(self, origin_x: int, origin_y: int, height: int) -> None:
        """
        Draw an n-byte sprite from I at (origin_x, origin_y).

        Draws closer together than min_draw_interval are dropped without
        reading memory or touching VF.
        """
        now = self._clock()
        if (
            self._min_draw_interval > 0
            and self._last_draw is not None
            and now - self._last_draw < self._min_draw_interval
        ):
            logger.debug(f"Draw at ${self._registers.pc:03X} skipped (paced)")
            return

        address = self._registers.i
        self._check_range(address, height)
        sprite = self._memory.read_bytes(address, height)

        collision = self._display.draw(
            origin_x, origin_y, sprite, wrap=self._quirks.wrap_sprites
        )
        self._registers.flag = 1 if collision else 0
        self._last_draw = now

    def _store_bcd(self, value: int) -> None:
        """Write hundreds, tens and ones of value to I, I+1, I+2."""
        address = self._registers.i
        self._check_writable(address, 3)
        self._memory.write(address, value // 100)
        self._memory.write(address + 1, (value // 10) % 10)
        self._memory.write(address + 2, value % 10)

    def _store_registers(self, last: int) -> None:
        """Store V0..V[last] inclusive at I."""
        regs = self._registers
        self._check_writable(regs.i, last + 1)
        for r in range(last + 1):
            self._memory.write(regs.i + r, regs.v[r])
        if self._quirks.increment_index_on_transfer:
            regs.i = regs.i + last + 1

    def _load_registers(self, last: int) -> None:
        """Load V0..V[last] inclusive from I."""
        regs = self._registers
        self._check_range(regs.i, last + 1)
        for r in range(last + 1):
            regs.v[r] = self._memory.read(regs.i + r)
        if self._quirks.increment_index_on_transfer:
            regs.i = regs.i + last + 1

    # =========================================================================
    # Quirks
    # =========================================================================

    @property
    def quirks(self) -> Quirks:
        return self._quirks

    @quirks.setter
    def quirks(self, value: Quirks) -> None:
        self._quirks = value
        self._keypad.consume_release_on_query = value.consume_release_on_query

    def configure_quirks(self, **changes: bool) -> Quirks:
        """
        Change individual quirk flags, leaving the others as they are.

        Example:
            >>> cpu.configure_quirks(shift_uses_vy=True, wrap_sprites=True)

        Returns:
            The new Quirks

        Raises:
            ValueError: If a name is not a quirk flag
        """
        unknown = set(changes) - set(Quirks.names())
        if unknown:
            raise ValueError(
                f"Unknown quirk(s): {', '.join(sorted(unknown))} "
                f"(valid: {', '.join(Quirks.names())})"
            )
        self.quirks = dataclasses.replace(self._quirks, **changes)
        return self._quirks

    # =========================================================================
    # Sound
    # =========================================================================

    def set_beep_handler(self, handler: Optional[BeepHandler]) -> None:
        """Replace the beep handler (None installs NullBeep)."""
        self._silence()
        self._beep = handler or NullBeep()

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    @sound_enabled.setter
    def sound_enabled(self, value: bool) -> None:
        self._sound_enabled = value
        if value:
            self._update_beep()
        else:
            self._silence()

    @property
    def is_beeping(self) -> bool:
        """True between a start() and the matching stop()."""
        return self._beeping

    def _update_beep(self) -> None:
        active = self._sound_enabled and self._registers.sound_timer.is_active
        if active == self._beeping:
            return
        self._beeping = active
        if active:
            self._beep.start()
        else:
            self._beep.stop()

    def _silence(self) -> None:
        if self._beeping:
            self._beeping = False
            self._beep.stop()

    # =========================================================================
    # Host Interface
    # =========================================================================

    @property
    def framebuffer(self) -> tuple[int, ...]:
        """Read-only snapshot of the 32 row words (bit 63 = leftmost pixel)."""
        return self._display.snapshot()

    def set_key(self, index: int, down: bool) -> None:
        """Set a keypad key (0-15) down or up."""
        self._keypad.set_key(index, down)

    # =========================================================================
    # Debug Introspection
    # =========================================================================

    def registers_snapshot(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp, dt, st
        """
        return self._registers.snapshot()

    def read_memory(self, address: int, count: int = 1) -> bytes:
        """Read a block of memory for inspection."""
        return self._memory.read_bytes(address, count)

    def stack_snapshot(self) -> tuple[int, ...]:
        """The 16 ring stack slots (SP is in registers_snapshot())."""
        return tuple(self._registers.stack)

    def disassemble_at(self, address: Optional[int] = None, count: int = 10) -> list[str]:
        """
        Disassemble instructions starting at an address (default: PC).

        BNNN is rendered in the form selected by the jump_uses_vx quirk.

        Returns:
            Lines such as "$200: 6012  LD V0, 0x12"
        """
        from ..disassembler import disassemble

        start = self._registers.pc if address is None else address
        end = min(start + count * 2, len(self._memory))
        data = self._memory.read_bytes(start, end - start)
        lines = disassemble(data, start, jump_uses_vx=self._quirks.jump_uses_vx)
        return [str(line) for line in lines]

    def __repr__(self) -> str:
        state = "halted" if self._halted else "running"
        if self._program is None:
            state = "empty"
        return (
            f"CPU({state}, pc=${self._registers.pc:03X}, "
            f"i=${self._registers.i:03X}, sp={self._registers.sp})"
        )
