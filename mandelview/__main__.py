"""
Allow running the package directly: python -m mandelview
"""
import sys

from .cli import main

sys.exit(main())
