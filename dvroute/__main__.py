import sys
from .run_node import main

sys.exit(main())
