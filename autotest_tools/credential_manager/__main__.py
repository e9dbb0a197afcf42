import sys

from .credential_manager import main

sys.exit(main())
