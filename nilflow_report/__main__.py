"""Allow ``python -m nilflow_report``."""

import sys

from nilflow_report.main import main

sys.exit(main())
