"""Input, renderer and window tests (pygame with the SDL dummy driver)."""

import numpy as np
import pygame
import pytest

from chip8emu.core.errors import StackUnderflowError
from chip8emu.platform.input_handler import InputHandler
from chip8emu.platform.window import Window
from chip8emu.shell.frame_renderer import FrameRenderer


def key_down(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def key_up(key):
    return pygame.event.Event(pygame.KEYUP, key=key)


@pytest.fixture
def pygame_session():
    pygame.init()
    yield
    pygame.quit()


class TestInputHandler:

    def test_keypad_mapping(self):
        handler = InputHandler()
        handler.handle_event(key_down(pygame.K_w))
        assert handler.pressed_key == 0x5
        handler.handle_event(key_up(pygame.K_w))
        assert handler.pressed_key is None

    @pytest.mark.parametrize("key,pad", [
        (pygame.K_1, 0x1), (pygame.K_4, 0xC), (pygame.K_x, 0x0), (pygame.K_v, 0xF),
    ])
    def test_layout_corners(self, key, pad):
        handler = InputHandler()
        handler.handle_event(key_down(key))
        assert handler.pressed_key == pad

    def test_most_recent_key_wins(self):
        handler = InputHandler()
        handler.handle_event(key_down(pygame.K_q))
        handler.handle_event(key_down(pygame.K_e))
        assert handler.pressed_key == 0x6
        handler.handle_event(key_up(pygame.K_e))
        assert handler.pressed_key == 0x4

    def test_unmapped_key_ignored(self):
        handler = InputHandler()
        handler.handle_event(key_down(pygame.K_m))
        assert handler.pressed_key is None

    def test_control_keys(self):
        handler = InputHandler()
        handler.handle_event(key_down(pygame.K_p))
        handler.handle_event(key_down(pygame.K_F1))
        assert handler.take_pause_request()
        assert not handler.take_pause_request()
        assert handler.take_reset_request()
        assert not handler.quit_requested
        handler.handle_event(key_down(pygame.K_ESCAPE))
        assert handler.quit_requested

    def test_window_close(self):
        handler = InputHandler()
        handler.handle_event(pygame.event.Event(pygame.QUIT))
        assert handler.quit_requested

    def test_clear_all(self):
        handler = InputHandler()
        handler.handle_event(key_down(pygame.K_a))
        handler.clear_all()
        assert handler.pressed_key is None


class TestFrameRenderer:

    def test_to_rgb(self, machine, pygame_session):
        machine.display.draw_sprite(0, 0, [0x80])
        renderer = FrameRenderer(machine, foreground=(10, 20, 30), background=(1, 2, 3))
        rgb = renderer.to_rgb()
        assert rgb.shape == (32, 64, 3)
        assert rgb.dtype == np.uint8
        assert tuple(rgb[0, 0]) == (10, 20, 30)
        assert tuple(rgb[0, 1]) == (1, 2, 3)

    def test_render_surface(self, machine, pygame_session):
        machine.display.draw_sprite(3, 2, [0x80])
        renderer = FrameRenderer(machine)
        surface = renderer.render()
        assert surface.get_size() == (64, 32)
        assert tuple(surface.get_at((3, 2)))[:3] == (255, 255, 255)
        assert tuple(surface.get_at((2, 3)))[:3] == (0, 0, 0)

    @pytest.mark.parametrize("colour", [(0, 0), (0, 0, 256), (-1, 0, 0)])
    def test_bad_colour(self, machine, pygame_session, colour):
        renderer = FrameRenderer(machine)
        with pytest.raises(ValueError):
            renderer.set_colours(colour, (0, 0, 0))


class TestWindow:

    def test_settings(self, machine, pygame_session):
        window = Window(machine, scale=50, speed=600)
        assert window.scale == 20
        assert window.cycles_per_frame == 10

    def test_invalid_speed(self, machine):
        with pytest.raises(ValueError):
            Window(machine, speed=0)

    def test_fault_stops_loop(self, make_machine, pygame_session):
        m = make_machine(0x00EE)
        window = Window(m, scale=1)
        window._running = True
        window._run_cycles()
        assert isinstance(window.fault, StackUnderflowError)
        assert not window.running

    def test_escape_quits(self, make_machine, pygame_session):
        m = make_machine(0x1200)
        window = Window(m, scale=1)
        window._running = True
        pygame.event.post(key_down(pygame.K_ESCAPE))
        window._tick()
        assert not window.running
        assert window.fault is None

    def test_pause_toggle_stops_cycles(self, make_machine, pygame_session):
        m = make_machine(0x7001, 0x1200)
        window = Window(m, scale=1)
        window._running = True
        pygame.event.post(key_down(pygame.K_p))
        window._tick()
        assert window.paused
        assert m.cycle_count == 0
        window.paused = False
        window._tick()
        assert m.cycle_count == window.cycles_per_frame
