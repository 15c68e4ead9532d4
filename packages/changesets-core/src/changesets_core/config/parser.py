"""Validate a hand-written changesets config and normalise it into a Config.

Validation collects every problem before failing so users can fix a config
in one pass.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from changesets_core.config.models import (
    DEFAULT_CHANGELOG_FILENAME,
    DEFAULT_CHANGELOG_GENERATOR,
    DEFAULT_GLOBAL_CHANGELOG_FILENAME,
    Config,
    WrittenConfig,
)
from changesets_core.errors import ConfigValidationError
from changesets_core.workspace import Package, PackageJson, Packages

DEFAULT_WRITTEN_CONFIG: Mapping[str, Any] = MappingProxyType(
    {
        "changelog": MappingProxyType(
            {
                "generator": (DEFAULT_CHANGELOG_GENERATOR, None),
                "filename": DEFAULT_CHANGELOG_FILENAME,
                "globalFilename": DEFAULT_GLOBAL_CHANGELOG_FILENAME,
            }
        ),
        "commit": False,
        "linked": (),
        "access": "restricted",
        "baseBranch": "master",
    }
)

# One message per invalid option, keyed by its written name; {} is the value
_FIELD_MESSAGES = {
    "changelog": (
        "The `changelog` option is set as {} when the only valid values are undefined, "
        'a module path(e.g. "@changesets/cli/changelog" or "./some-module") or a tuple '
        "with a module path and config for the changelog generator"
        '(e.g. ["@changesets/cli/changelog", {{ someOption: true }}])'
    ),
    "access": (
        "The `access` option is set as {} when the only valid values are undefined, "
        '"public" or "restricted"'
    ),
    "commit": (
        "The `commit` option is set as {} when the only valid values are undefined "
        "or a boolean"
    ),
    "baseBranch": (
        "The `baseBranch` option is set as {} but the `baseBranch` option can only be "
        "set as a string"
    ),
    "linked": (
        "The `linked` option is set as {} when the only valid values are undefined "
        "or an array of arrays of package names"
    ),
}


def _render(value: Any) -> str:
    if isinstance(value, Mapping):
        value = dict(value)
    return json.dumps(value, indent=2, default=repr)


def _linked_messages(linked: Iterable[Iterable[str]], package_names: set[str]) -> list[str]:
    missing: dict[str, None] = {}
    duplicated: dict[str, None] = {}
    found: set[str] = set()
    for group in linked:
        for name in group:
            if name not in package_names:
                missing[name] = None
            if name in found:
                duplicated[name] = None
            found.add(name)

    messages = [
        f'The package "{name}" is specified in the `linked` option but it is not found '
        "in the project. You may have misspelled the package name."
        for name in missing
    ]
    messages.extend(
        f'The package "{name}" is in multiple sets of linked packages. Packages can only '
        "be in a single set of linked packages."
        for name in duplicated
    )
    return messages


def parse(written: Mapping[str, Any], packages: Packages) -> Config:
    """Validate *written* against *packages* and return the normalised Config.

    Absent options take their value from ``DEFAULT_WRITTEN_CONFIG``.
    ``access: "private"`` is accepted as ``"restricted"`` with a warning.

    Raises:
        ConfigValidationError: listing every problem found.
    """
    try:
        document = WrittenConfig.model_validate(written)
    except ValidationError as e:
        invalid = {err["loc"][0] if err["loc"] else None for err in e.errors()}
        if None in invalid:
            raise ConfigValidationError(
                [f"The config is set as {_render(written)} but it must be a JSON object"]
            ) from e
        messages = [
            template.format(_render(written.get(option)))
            for option, template in _FIELD_MESSAGES.items()
            if option in invalid
        ]
        if "linked" not in invalid:
            messages.extend(_linked_messages(written.get("linked", ()), packages.names))
        raise ConfigValidationError(messages) from e

    messages = _linked_messages(document.linked, packages.names)
    if messages:
        raise ConfigValidationError(messages)

    return Config(
        changelog=document.changelog.normalise(),
        access=document.access,
        commit=document.commit,
        linked=tuple(tuple(group) for group in document.linked),
        base_branch=document.base_branch,
    )


_PLACEHOLDER_PACKAGE = Package(dir=Path(""), package_json=PackageJson(name="", version=""))

DEFAULT_CONFIG: Config = parse(
    DEFAULT_WRITTEN_CONFIG,
    Packages(root=_PLACEHOLDER_PACKAGE, tool="root", packages=[_PLACEHOLDER_PACKAGE]),
)
