import sys

from pomodoro.cli import main

sys.exit(main())
