import sys

from tqkit.cli.main import main

sys.exit(main())
