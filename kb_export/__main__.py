import sys

from kb_export.main import main

sys.exit(main())
