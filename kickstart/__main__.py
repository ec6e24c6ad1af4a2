import sys

from kickstart.pipeline import main

sys.exit(main())
