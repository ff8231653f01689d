#!/usr/bin/env python3
"""Launch the voice changer renderer from the project root.

Usage:
    uv run python main.py clip.wav --effect robot
    uv run python -m voicefx.main clip.wav out/ --all
"""

import sys

if __name__ == "__main__":
    from voicefx.main import main
    sys.exit(main())
