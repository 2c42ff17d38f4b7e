import sys

from kinderbase.cli import main

sys.exit(main())
