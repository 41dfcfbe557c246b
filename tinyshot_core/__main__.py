import sys

from tinyshot_core.cli.snapshot import main

sys.exit(main())
