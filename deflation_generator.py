# deflation_generator.py
import os
import signal
import argparse
import logging
import glfw
from OpenGL.GL import *
from deflation_tools import Operations, ImageRenderer, shutdown_event
from deflation_tools.OptimizedRenderer import OptimizedRenderer

CONFIG_PATH = 'config.ini'

op = Operations()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger('Deflation_Generator')


def initialize_config(path):
    if not os.path.isfile(path):
        logger.info(f"Config file {path} not found, using defaults.")
    return op.read_config_file(path)


def apply_overrides(config_data, args):
    if args.generations is not None:
        config_data['generations'] = args.generations
    if config_data['generations'] < 0:
        logger.warning(f"Negative generation count {config_data['generations']}, drawing the seed tiles only.")
        config_data['generations'] = 0
    return config_data


def setup_window(width, height, fullscreen=False):
    if not glfw.init():
        raise RuntimeError("GLFW can't be initialized")

    # Request OpenGL 3.1 context
    glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
    glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 1)
    glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, GL_TRUE)
    glfw.window_hint(glfw.RESIZABLE, GL_FALSE)
    glfw.window_hint(glfw.SAMPLES, 4)

    primary_monitor = glfw.get_primary_monitor()

    if fullscreen:
        video_mode = glfw.get_video_mode(primary_monitor)
        width, height = video_mode.size.width, video_mode.size.height
        window = glfw.create_window(width, height, "Penrose Tiling", primary_monitor, None)
    else:
        window = glfw.create_window(width, height, "Penrose Tiling", None, None)

    if not window:
        glfw.terminate()
        raise RuntimeError("GLFW window can't be created")

    glfw.make_context_current(window)
    return window, width, height


def install_signal_handlers():
    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down.")
        shutdown_event.set()
        glfw.post_empty_event()
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)


def run_headless(config_data):
    renderer = ImageRenderer(op)
    image = renderer.render_tiles(config_data['width'], config_data['height'], config_data)
    image.show(title="Penrose Tiling")


def run_window(config_data, fullscreen=False, progressive=False):
    window, width, height = setup_window(config_data['width'], config_data['height'], fullscreen)
    renderer = None
    try:
        glEnable(GL_MULTISAMPLE)
        fb_width, fb_height = glfw.get_framebuffer_size(window)
        glViewport(0, 0, fb_width, fb_height)

        renderer = OptimizedRenderer(op)
        interval = config_data['interval'] if progressive else 0
        start_time = glfw.get_time()
        shown_generation = op.generation_at(0, config_data['generations'], interval)

        def draw(win):
            renderer.render_tiles(width, height, config_data, shown_generation)
            glfw.swap_buffers(win)

        glfw.set_window_refresh_callback(window, draw)
        draw(window)

        while not glfw.window_should_close(window) and not shutdown_event.is_set():
            glfw.wait_events_timeout(0.25)
            generation = op.generation_at(glfw.get_time() - start_time,
                                          config_data['generations'], interval)
            if generation != shown_generation:
                logger.info(f"Showing generation {generation}")
                shown_generation = generation
                draw(window)
    finally:
        if renderer:
            renderer.cleanup()
        glfw.terminate()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Penrose Kite and Dart Tiling Generator")
    parser.add_argument('--config', default=CONFIG_PATH, help='Path to the INI settings file')
    parser.add_argument('--generations', type=int, help='Number of deflation generations')
    parser.add_argument('--fullscreen', action='store_true', help='Run in fullscreen mode')
    parser.add_argument('--headless', action='store_true', help='Rasterize with Pillow instead of opening a window')
    parser.add_argument('--progressive', action='store_true', help='Show one more generation every interval seconds')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        logger.info("Starting the deflation generator.")
        config_data = apply_overrides(initialize_config(args.config), args)
        install_signal_handlers()
        if args.headless:
            run_headless(config_data)
        else:
            run_window(config_data, fullscreen=args.fullscreen, progressive=args.progressive)
    except Exception as e:
        logger.error(f"An error occurred: {e}")
        raise
    finally:
        shutdown_event.set()
        logger.info("Application has been terminated.")


if __name__ == '__main__':
    main()
