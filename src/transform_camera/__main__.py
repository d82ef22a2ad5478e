"""Entry point for python -m transform_camera."""

import sys

from transform_camera.cli import main

if __name__ == "__main__":
    sys.exit(main())
