"""
Main application module for the Mandelbrot viewer.

Contains the MandelviewApp class which handles:
- Window setup and main loop
- User input (keyboard, mouse wheel, drag) routed to the ViewportController
- Rendering when the view changed, and presenting the frame
"""

import logging

import pygame

from .renderer import MandelbrotRenderer
from .viewport import ViewportController
from .colormaps import buffer_to_rgb
from .compute import set_thread_count, warmup_jit


logger = logging.getLogger(__name__)

# Held keys polled once per frame -> (dx, dy) pan direction
PAN_KEYS = {
    pygame.K_LEFT: (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_UP: (0, -1),
    pygame.K_DOWN: (0, 1),
}
ZOOM_IN_KEYS = (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS, pygame.K_PERIOD)
ZOOM_OUT_KEYS = (pygame.K_MINUS, pygame.K_KP_MINUS, pygame.K_COMMA)


class DisplayError(RuntimeError):
    """The window could not be created."""


class MandelviewApp:
    """
    Main application class for the Mandelbrot viewer.

    Handles the pygame window, event loop, and coordinates between the
    viewport controller, the renderer, and the display.
    """

    CAPTION = "Mandelbrot Set - arrows/drag to pan, +/- or wheel to zoom, R to reset"

    def __init__(self, settings):
        """
        Initialize the application.

        Args:
            settings: A validated Settings instance
        """
        self.settings = settings
        self.width = settings.width
        self.height = settings.height

        self.controller = ViewportController(
            settings.initial_viewport(),
            pan_step=settings.pan_step,
            zoom_factor=settings.zoom_factor,
            wheel_zoom_factor=settings.wheel_zoom_factor,
        )
        self.renderer = MandelbrotRenderer.from_settings(settings)

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Input state
        self.mouse_pos = (self.width // 2, self.height // 2)

        self.needs_render = True
        self.frames_rendered = 0
        self.running = False

    def run(self):
        """Run the application main loop until Esc or window close."""
        self._init_pygame()
        try:
            set_thread_count(self.settings.threads)
            self._warmup()

            self.running = True
            while self.running:
                self._handle_events()
                if not self.running:
                    break
                self.poll_keys(pygame.key.get_pressed())
                if self.needs_render:
                    self._render_and_present()
                self.clock.tick(self.settings.max_fps)
        finally:
            pygame.quit()
        logger.info("Exiting after %d frames", self.frames_rendered)

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        try:
            self.screen = pygame.display.set_mode((self.width, self.height), 0, 32)
        except pygame.error as e:
            pygame.quit()
            logger.error("Could not create %dx%d window: %s", self.width, self.height, e)
            raise DisplayError(f"Could not create window: {e}") from e
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()

    def _warmup(self):
        """Compile the JIT kernels before the first interactive frame."""
        pygame.display.set_caption("Compiling (first run only)...")
        logger.info("Compiling kernels")
        warmup_jit()
        pygame.display.set_caption(self.CAPTION)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event):
        """Apply one pygame event to the application state."""
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            self._handle_key(event)
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 3:
                self._mark(self.controller.reset())
        elif event.type == pygame.MOUSEMOTION:
            self.mouse_pos = event.pos
            if event.buttons[0]:
                dx, dy = event.rel
                self._mark(self.controller.drag(dx, dy, self.width, self.height))
        elif event.type == pygame.MOUSEWHEEL:
            if event.y:
                mx, my = self.mouse_pos
                self._mark(self.controller.zoom_at(mx, my, self.width, self.height,
                                                   zoom_in=event.y > 0))

    def _handle_key(self, event):
        """Handle one-shot keyboard commands."""
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_r:
            self._mark(self.controller.reset())
        elif event.key == pygame.K_p:
            logger.info("Palette: %s", self.renderer.cycle_palette())
            self.needs_render = True
        elif event.key == pygame.K_RIGHTBRACKET:
            self._mark(self.renderer.update_settings(max_iter=self.renderer.max_iter * 2))
            logger.info("Max iterations: %d", self.renderer.max_iter)
        elif event.key == pygame.K_LEFTBRACKET:
            self._mark(self.renderer.update_settings(max_iter=self.renderer.max_iter // 2))
            logger.info("Max iterations: %d", self.renderer.max_iter)

    def poll_keys(self, pressed):
        """
        Apply held navigation keys, once per frame.

        Args:
            pressed: Key state lookup, as returned by pygame.key.get_pressed()
        """
        dx = sum(d[0] for key, d in PAN_KEYS.items() if pressed[key])
        dy = sum(d[1] for key, d in PAN_KEYS.items() if pressed[key])
        if dx or dy:
            self._mark(self.controller.pan(dx, dy))
        if any(pressed[key] for key in ZOOM_IN_KEYS):
            self._mark(self.controller.zoom_in())
        if any(pressed[key] for key in ZOOM_OUT_KEYS):
            self._mark(self.controller.zoom_out())

    def _mark(self, changed):
        if changed:
            self.needs_render = True

    def _render_and_present(self):
        """Render the current viewport snapshot and hand it to the display."""
        viewport = self.controller.snapshot()
        buffer = self.renderer.render_frame(viewport)
        self.present(buffer)
        self.needs_render = False
        self.frames_rendered += 1
        pygame.display.set_caption(
            f"Mandelbrot Set - center ({viewport.center_x:.6g}, {viewport.center_y:.6g}) "
            f"zoom {viewport.zoom:.3g} - {self.renderer.last_render_ms:.0f} ms"
        )

    def present(self, buffer):
        """Copy a packed width*height buffer onto the window surface."""
        rgb = buffer_to_rgb(buffer, self.width, self.height)
        pygame.surfarray.blit_array(self.screen, rgb.swapaxes(0, 1))
        pygame.display.flip()


def run(settings):
    """
    Run the Mandelbrot viewer.

    Args:
        settings: A validated Settings instance
    """
    app = MandelviewApp(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return app
