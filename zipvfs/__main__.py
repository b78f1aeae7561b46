# python
"""
zipvfs.__main__
Entry point for python -m zipvfs
"""
from .server import main

if __name__ == "__main__":
    main()
