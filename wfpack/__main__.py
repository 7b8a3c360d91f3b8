"""python -m wfpack 入口"""

from wfpack.cli import main

if __name__ == "__main__":
    main()
