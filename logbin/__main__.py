import sys

from logbin.main import main

if __name__ == "__main__":
    sys.exit(main())
