import sys

from sasscmd.cli import main

sys.exit(main())
