import sys

from checkup.cli import main

sys.exit(main())
