import sys

from student_manager.cli import main

sys.exit(main())
