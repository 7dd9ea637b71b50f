"""
Command line entry point: parse options, configure logging, start the viewer.
"""

import logging
import sys
from argparse import ArgumentParser

from .colormaps import list_colormap_names
from . import app
from .config import ConfigError, build_settings, load_settings


logger = logging.getLogger(__name__)


def setup_logging(verbose=False):
    """Configure the root logger once for the whole process."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def build_parser():
    parser = ArgumentParser(prog='mandelview',
                            description='Interactive Mandelbrot set viewer.')
    parser.add_argument('--config', type=str, default=None,
                        help='path to a JSON settings file (default: settings.json beside the package)')
    parser.add_argument('--width', type=int,
                        help='window width in pixels')
    parser.add_argument('--height', type=int,
                        help='window height in pixels')
    parser.add_argument('--max-iterations', dest='max_iterations', type=int,
                        help='escape-time cutoff per pixel')
    parser.add_argument('--escape-radius', dest='escape_radius', type=float,
                        help='|z| beyond which a point has escaped')
    parser.add_argument('--center-x', dest='center_x', type=float,
                        help='initial real coordinate at the middle of the window')
    parser.add_argument('--center-y', dest='center_y', type=float,
                        help='initial imaginary coordinate at the middle of the window')
    parser.add_argument('--zoom', type=float,
                        help='initial magnification')
    parser.add_argument('--palette', type=str, choices=list_colormap_names(),
                        help='color palette')
    parser.add_argument('--hue-step', dest='hue_step', type=float,
                        help='degrees of hue per iteration for the rainbow palette')
    parser.add_argument('--max-fps', dest='max_fps', type=int,
                        help='frame rate cap')
    parser.add_argument('--threads', type=int,
                        help='number of render threads (default: one per core)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log per-frame render timings')
    return parser


def main(argv=None):
    """
    Parse arguments and run the viewer.

    Returns:
        Process exit status: 0 on a clean exit, 1 if the window could not
        be opened, 2 for an unreadable settings file.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    overrides = {k: v for k, v in vars(args).items() if k not in ('config', 'verbose')}
    try:
        settings = build_settings(load_settings(args.config), overrides)
    except ConfigError as e:
        logger.error("%s", e)
        return 2

    logger.info("Starting %dx%d view at center=(%g, %g) zoom=%g, max_iterations=%d",
                settings.width, settings.height, settings.center_x, settings.center_y,
                settings.zoom, settings.max_iterations)

    try:
        app.run(settings)
    except app.DisplayError:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
