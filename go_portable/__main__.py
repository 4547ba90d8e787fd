import sys

from go_portable.cli import main

if __name__ == "__main__":
    sys.exit(main())
