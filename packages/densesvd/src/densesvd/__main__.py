"""python -m densesvd"""

import sys

from densesvd.cli import main

sys.exit(main())
