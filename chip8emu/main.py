"""
CHIP8EMU -- CHIP-8 interpreter.

Command-line entry point.  Parses arguments, creates the machine from a
ROM file, and launches the pygame display window.

Usage examples::

    # Run a ROM
    chip8emu roms/pong.ch8

    # Faster CPU, bigger window, reproducible random numbers
    chip8emu roms/pong.ch8 --speed 1000 --scale 12 --seed 42

    # Original-hardware shift behaviour
    chip8emu roms/test.ch8 --shift-sets-flag

    # Print ROM metadata and a disassembly without launching
    chip8emu roms/pong.ch8 --info

    # Run 500 cycles headless and dump the machine state
    chip8emu roms/pong.ch8 --debug 500
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from chip8emu.core.errors import Chip8Error
from chip8emu.core.quirks import Quirks
from chip8emu.shell.diagnostics import format_state
from chip8emu.shell.disassembler import format_listing
from chip8emu.shell.services.machine_factory import MachineFactory
from chip8emu.shell.services.rom_bytes_service import RomBytesService


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chip8emu",
        description=(
            "CHIP8EMU -- CHIP-8 interpreter.  "
            "Load a ROM file and run it in a pygame window."
        ),
    )

    parser.add_argument(
        "rom",
        help="Path to the ROM file (.ch8, .c8, .rom)",
    )

    # Display
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=10,
        help="Display scale factor (1-20).  Default: 10.",
    )

    # CPU
    parser.add_argument(
        "--speed",
        type=int,
        default=700,
        help="Instructions per second.  Default: 700.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random number generator (default: random).",
    )

    # Quirks
    parser.add_argument(
        "--shift-sets-flag",
        action="store_true",
        default=False,
        help="8xy6/8xyE write the shifted-out bit to VF.",
    )
    parser.add_argument(
        "--strict-alignment",
        action="store_true",
        default=False,
        help="Treat an odd program counter as a fatal error.",
    )
    parser.add_argument(
        "--wrap-memory",
        action="store_true",
        default=False,
        help="Wrap I-relative addresses past 0xFFF instead of halting.",
    )

    # Debugging / info
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print ROM metadata and a disassembly, then exit.",
    )
    parser.add_argument(
        "--debug",
        type=int,
        default=None,
        metavar="CYCLES",
        help="Run CYCLES instructions headless, print the machine state and exit.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Info mode
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> int:
    """Print human-readable metadata and a disassembly for a ROM."""
    try:
        info = MachineFactory.describe(rom_path)
        data = RomBytesService.read(rom_path)
    except OSError as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1

    print("CHIP8EMU ROM Information")
    print("=" * 40)
    for key, value in info.items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    print(format_listing(data))
    return 0


# ---------------------------------------------------------------------------
# Debug mode
# ---------------------------------------------------------------------------

def _run_debug(machine, cycles: int) -> int:
    """Run *cycles* instructions without a window and dump the state."""
    print("=" * 60)
    print("CHIP8EMU Debug Diagnostics")
    print("=" * 60)
    print(f"Machine: {machine!r}")

    status = 0
    for _ in range(cycles):
        try:
            machine.cycle()
        except Chip8Error as exc:
            print(f"Halted: {exc}")
            status = 1
            break

    print(format_state(machine))
    print("=" * 60)
    return status


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    logger = logging.getLogger("chip8emu.main")

    # Validate the ROM path early.
    rom_path: str = os.path.expanduser(args.rom)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    if args.info:
        return _print_rom_info(rom_path)

    quirks = Quirks(
        shift_sets_flag=args.shift_sets_flag,
        strict_alignment=args.strict_alignment,
        wrap_memory=args.wrap_memory,
    )

    try:
        machine = MachineFactory.create(rom_path, seed=args.seed, quirks=quirks)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.debug is not None:
        return _run_debug(machine, args.debug)

    # Imported here so --info / --debug work without a display.
    from chip8emu.platform.window import Window

    logger.info("Starting emulation ...")
    window = None
    try:
        window = Window(machine, scale=args.scale, speed=args.speed)
        window.run()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.exception("Fatal error during emulation")
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    if window is not None and window.fault is not None:
        print(f"Error: {window.fault}", file=sys.stderr)
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
