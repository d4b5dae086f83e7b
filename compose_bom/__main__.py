# compose_bom/__main__.py
import sys

from compose_bom.run_extraction import main

sys.exit(main())
