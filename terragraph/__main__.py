import sys

from terragraph.cli import main

sys.exit(main())
