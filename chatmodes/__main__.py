"""Allow `python -m chatmodes`."""
import sys

from .cli import main

sys.exit(main())
