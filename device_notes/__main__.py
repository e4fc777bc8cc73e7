import sys

from device_notes.cli import main

sys.exit(main())
