"""Command line driver.

    simmat categoryFile matrixFile imageName [-distance] [-paper]

Exit codes: 0 success, 1 I/O or parse failure, 2 usage error.
"""

from __future__ import annotations

import argparse
import logging
import sys

from simmat.config import configure_logging, settings
from simmat.engine.config import RenderConfig
from simmat.engine.errors import SimMatError, UsageError
from simmat.engine.pipeline import create_pipeline
from simmat.render.canvas import save_gif

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

_DESCRIPTION = """\
The categoryFile is in PSB CLA format.
The matrixFile is a file of floating point distance values in binary format.
The imageName will be the name of the created image; .gif is appended if necessary.
"""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message, source=self.prog)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="simmat",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("category_file", help="PSB CLA category file")
    parser.add_argument("matrix_file", help="binary float32 dissimilarity matrix")
    parser.add_argument("output", help="output image name")
    parser.add_argument(
        "-distance",
        "--distance",
        action="store_true",
        help="grayscale image of the distances instead of the tier recall colour image",
    )
    parser.add_argument(
        "-paper",
        "-screen",
        "--paper",
        dest="paper",
        action="store_true",
        help="white background and print colour scheme for colour images",
    )
    parser.add_argument(
        "--full-names",
        action="store_true",
        help="label category blocks with their full hierarchical names",
    )
    parser.add_argument(
        "--list-categories",
        action="store_true",
        help="print every non-empty category after loading",
    )
    parser.add_argument("--log-level", default=settings.simmat_log_level, help="logging level")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e.message}", file=sys.stderr)
        return EXIT_USAGE

    configure_logging(args.log_level)

    config = RenderConfig.from_settings()
    config.full_names = config.full_names or args.full_names
    pipeline = create_pipeline(config)

    try:
        benchmark = pipeline.load(args.category_file, args.matrix_file)
        if args.list_categories:
            for category in benchmark.tree.category_order:
                print(category.describe())
        result = pipeline.render(benchmark, distance=args.distance, paper=args.paper)
        target = save_gif(result.image, args.output, config)
    except SimMatError as e:
        print(f"{parser.prog}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    logger.info("Finished writing %s image %s", result.grid.mode.value, target)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
