import argparse
import logging
import math
import time

import numpy as np
from tqdm import tqdm

from whitted.config import (
    BACKGROUND_COLOR, BIAS_EPSILON, DEFAULT_HEIGHT, DEFAULT_WIDTH,
    MAX_RECURSION_DEPTH, WORLD_HORIZON, RenderConfig,
)
from whitted.image import Image
from whitted.integrator import STRATEGIES, iter_rows, render_image
from whitted.scene import build_scene, default_scene
from whitted.utils import quantize


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Whitted ray tracer - render the stock sphere scene")
    parser.add_argument('--width', type=int, default=DEFAULT_WIDTH, help='Image width')
    parser.add_argument('--height', type=int, default=DEFAULT_HEIGHT, help='Image height')
    parser.add_argument('--fov', type=float, default=90.0, help='Vertical field of view in degrees')
    parser.add_argument('--max-depth', type=int, default=MAX_RECURSION_DEPTH, help='Maximum reflection depth')
    parser.add_argument('--background', type=float, nargs=3, default=BACKGROUND_COLOR,
                        metavar=('R', 'G', 'B'), help='Background color, linear [0, 1]')
    parser.add_argument('--world-horizon', type=float, default=WORLD_HORIZON,
                        help='Hits beyond this distance count as misses')
    parser.add_argument('--bias', type=float, default=BIAS_EPSILON,
                        help='Offset of shadow/reflection ray origins along the normal')
    parser.add_argument('--strategy', choices=STRATEGIES + ("rows",), default="vectorized",
                        help='Pixel scheduling: all at once, one at a time, or row by row with progress')
    parser.add_argument('--output', type=str, default="out.png", help='Output PNG path')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = RenderConfig.create(
            width=args.width,
            height=args.height,
            fov=math.radians(args.fov),
            max_depth=args.max_depth,
            background_color=args.background,
            world_horizon=args.world_horizon,
            bias_epsilon=args.bias,
        )
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    spheres, lights = default_scene()
    scene = build_scene(spheres, lights)
    print(f"Scene: {scene.num_spheres} spheres, {scene.num_lights} lights")

    # --- Rendering ---
    print(f"Rendering {config.width}x{config.height} image ({args.strategy}, max depth {config.max_depth})...")
    start_time = time.time()
    if args.strategy == "rows":
        colors = np.zeros((config.height, config.width, 3), dtype=np.float64)
        for j, row in tqdm(iter_rows(scene, config), total=config.height, unit="row"):
            colors[j] = np.asarray(row)
        pixels = np.asarray(quantize(colors))
    else:
        pixels = np.asarray(quantize(render_image(scene, config, args.strategy)))
    end_time = time.time()
    print(f"Rendering finished in {end_time - start_time:.2f} seconds.")

    # --- Save Image ---
    image = Image.from_buffer(config.width, config.height, pixels)
    output_path = image.save(args.output)
    print(f"PNG saved to {output_path}")
    return output_path


if __name__ == "__main__":
    main()
