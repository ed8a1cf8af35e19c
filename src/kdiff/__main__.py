"""Allow running kdiff as `python -m kdiff`."""

import kdiff.cli as cli

if __name__ == "__main__":
    cli.main()
