# debgraph/debgraph.py
import sys

from debgraph.modules import cli


def main():
    sys.exit(cli.main())


if __name__ == "__main__":
    main()
