import sys

from troutgen.cli import main

sys.exit(main())
