# CHIP8EMU pygame host
