import sys

from welcome_gate.main import main

sys.exit(main())
