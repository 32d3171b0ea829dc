import sys

from weatherservice.main import main

sys.exit(main())
