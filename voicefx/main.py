#!/usr/bin/env python3
"""Voice changer — render a recorded clip through one of the fixed voices."""

import logging
import sys

from voicefx.audio.render import build_parser, run


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(name)s %(levelname)s: %(message)s")
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
