"""Allow running sysreport with `python -m sysreport`."""

import sys

from sysreport.report import main

if __name__ == "__main__":
    sys.exit(main())
