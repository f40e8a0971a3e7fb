"""Allow ``python -m zorsh_codegen``."""

import sys

from zorsh_codegen.cli import main

sys.exit(main())
