# CHIP8EMU host-side services
