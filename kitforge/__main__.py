import sys

from kitforge.cli import main

sys.exit(main())
