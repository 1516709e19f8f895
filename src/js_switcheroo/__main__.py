"""
Entry point for module execution (``python -m js_switcheroo``).

This module delegates execution to the CLI handler in ``js_switcheroo.cli.__main__``.
"""

import sys
from js_switcheroo.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
