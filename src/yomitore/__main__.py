"""Module entrypoint for `python -m yomitore`."""

from yomitore.runner import main

if __name__ == "__main__":
    main()
