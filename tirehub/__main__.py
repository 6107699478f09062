"""
Entry point for running tirehub as a module.

Usage:
    python -m tirehub parse "1100 R22 T-2400 14/C"
    python -m tirehub search --width 155 --aspect-ratio 70 --rim-diameter 13
    python -m tirehub serve --port 8000
"""

import sys

from tirehub.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
