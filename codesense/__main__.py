"""Allow ``python -m codesense``."""

from codesense.main import main

if __name__ == "__main__":
    raise SystemExit(main())
