"""usenest — sort, deduplicate and nest top-level Rust use declarations.

Stable public API:
    nest_file: Rewrite a Rust source string and return a NestResult.
    nest_source: Rewrite a Rust source string and return the new text.
    NestResult: Dataclass returned by nest_file.
    AppConfig: Layout settings; ``AppConfig.load()`` reads them.
    ConfigLoadError: Raised when the application config fails to load.
    UseParseError: Raised when a use declaration cannot be parsed.
"""

__version__ = "0.1.0"

from usenest.engine import NestResult, nest_file
from usenest.exceptions import ConfigLoadError, UseParseError
from usenest.lib.models import AppConfig
from usenest.lib.nester import nest_source

__all__ = [
    "__version__",
    "nest_file",
    "nest_source",
    "NestResult",
    "AppConfig",
    "ConfigLoadError",
    "UseParseError",
]
