from .loader import config_path, read, read_or_default
from .models import (
    Access,
    ChangelogConfig,
    ChangelogDisabled,
    ChangelogModule,
    ChangelogModuleWithOptions,
    ChangelogObject,
    Config,
    WrittenChangelog,
    WrittenConfig,
)
from .parser import DEFAULT_CONFIG, DEFAULT_WRITTEN_CONFIG, parse

__all__ = [
    "Access",
    "ChangelogConfig",
    "ChangelogDisabled",
    "ChangelogModule",
    "ChangelogModuleWithOptions",
    "ChangelogObject",
    "Config",
    "DEFAULT_CONFIG",
    "DEFAULT_WRITTEN_CONFIG",
    "WrittenChangelog",
    "WrittenConfig",
    "config_path",
    "parse",
    "read",
    "read_or_default",
]
