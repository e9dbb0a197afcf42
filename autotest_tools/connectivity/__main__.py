import sys

from .api_connectivity import main

sys.exit(main())
