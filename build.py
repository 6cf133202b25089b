#!/usr/bin/env python3
from techblog.cli import main

if __name__ == "__main__":
    main()
