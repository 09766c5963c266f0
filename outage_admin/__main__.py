"""
Entrypoint for running the admin CLI as a module.

Usage:
    python -m outage_admin [OPTIONS] COMMAND [ARGS]...
    outage-admin [OPTIONS] COMMAND [ARGS]...  (after pip install)
"""

from outage_admin.cli import main

if __name__ == "__main__":
    main()
