import sys

from clinic_records.cli import main

sys.exit(main())
