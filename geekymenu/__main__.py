import sys

from geekymenu.app import main

sys.exit(main())
