"""Run the file server: ``python -m fileserver --path ./shared --users alice:secret``."""
from .cli import main

if __name__ == "__main__":
    main()
