import sys

from curriculum_toolkit.cli import main

sys.exit(main())
