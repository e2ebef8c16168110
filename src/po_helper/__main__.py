"""``python -m po_helper`` のエントリーポイント"""

import sys

from po_helper.cli import main

sys.exit(main())
