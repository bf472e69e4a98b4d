#!/usr/bin/env python3

from gamus.main import main

if __name__ == "__main__":
    raise SystemExit(main())
