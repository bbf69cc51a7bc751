"""Bootstrap entry point: load the application config and print it.

Run as ``python -m usenest`` or ``usenest-bootstrap``.  A load failure is
not caught here; ``ConfigLoadError`` reaches the interpreter, which prints
the traceback and exits with status 1.
"""

from __future__ import annotations

from usenest.lib import config
from usenest.lib.models import AppConfig


def main() -> None:
    """Load the application config and write its repr to stdout."""
    app_config = AppConfig.load()
    print(config.get_str("messages.loaded_config").format(config=app_config))


if __name__ == "__main__":
    main()
