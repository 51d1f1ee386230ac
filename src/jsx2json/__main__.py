import sys

from jsx2json.cli import main

sys.exit(main())
