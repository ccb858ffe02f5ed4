"""Entry point for ``python -m edmgutil``."""

from edmgutil.cli.main import main


if __name__ == "__main__":
    main()
