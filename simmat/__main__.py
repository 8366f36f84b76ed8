import sys

from simmat.cli import main

sys.exit(main())
