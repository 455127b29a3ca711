import sys

from xslt_gateway.cli import main

sys.exit(main())
