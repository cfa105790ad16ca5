#!/usr/bin/env python3
"""
Image Upscaling Package Entry Point

Allows running the CLI as a module:
    python -m image_upscaling upscale in.png out.png -s 2
    python -m image_upscaling analyze in.png
    python -m image_upscaling algorithms -v
"""

import sys

from image_upscaling.core.cli import main

if __name__ == '__main__':
    sys.exit(main())
