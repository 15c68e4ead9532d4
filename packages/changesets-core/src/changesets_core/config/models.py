"""Config models: the written document, its changelog shapes, and the normalised Config."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    StringConstraints,
    field_validator,
)

logger = logging.getLogger(__name__)

DEFAULT_CHANGELOG_GENERATOR = "@changesets/cli/changelog"
DEFAULT_CHANGELOG_FILENAME = "CHANGELOG.md"
DEFAULT_GLOBAL_CHANGELOG_FILENAME = "RELEASE_NOTES.md"

Access = Literal["public", "restricted"]


class ChangelogConfig(BaseModel):
    """Normalised changelog settings: a generator module plus its options."""

    model_config = ConfigDict(frozen=True)

    generator: tuple[str, Any]
    filename: str = DEFAULT_CHANGELOG_FILENAME
    global_filename: str = DEFAULT_GLOBAL_CHANGELOG_FILENAME


class Config(BaseModel):
    """Validated release policy for one repository. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    changelog: ChangelogConfig | Literal[False]
    access: Access
    commit: bool
    linked: tuple[tuple[str, ...], ...]
    base_branch: str

    def linked_group(self, package_name: str) -> tuple[str, ...] | None:
        """Return the linked group containing *package_name*, if any."""
        for group in self.linked:
            if package_name in group:
                return group
        return None


# ── Written changelog shapes ───────────────────────────────────────
#
# A hand-written `changelog` value may take several forms. Each accepted form
# validates into its own type with a normalise() that yields the canonical
# setting.


@dataclass(frozen=True)
class ChangelogDisabled:
    """``"changelog": false``"""

    def normalise(self) -> Literal[False]:
        return False


@dataclass(frozen=True)
class ChangelogModule:
    """``"changelog": "<module path>"``"""

    module: str

    def normalise(self) -> ChangelogConfig:
        return ChangelogConfig(generator=(self.module, None))


@dataclass(frozen=True)
class ChangelogModuleWithOptions:
    """``"changelog": ["<module path>", <options>]``"""

    module: str
    options: Any = None

    def normalise(self) -> ChangelogConfig:
        return ChangelogConfig(generator=(self.module, copy.deepcopy(self.options)))


_Disabled = Annotated[Literal[False], AfterValidator(lambda _: ChangelogDisabled())]
_Module = Annotated[StrictStr, AfterValidator(ChangelogModule)]
_NamedModule = Annotated[
    str, StringConstraints(strict=True, min_length=1), AfterValidator(ChangelogModule)
]
_ModuleWithOptions = Annotated[
    tuple[StrictStr, Any], AfterValidator(lambda v: ChangelogModuleWithOptions(*v))
]


class ChangelogObject(BaseModel):
    """``"changelog": {"generator": ..., "filename": ..., "globalFilename": ...}``"""

    model_config = ConfigDict(frozen=True)

    generator: Union[_NamedModule, _ModuleWithOptions]
    filename: StrictStr | None = None
    global_filename: StrictStr | None = Field(default=None, alias="globalFilename")

    def normalise(self) -> ChangelogConfig:
        return ChangelogConfig(
            generator=self.generator.normalise().generator,
            filename=self.filename or DEFAULT_CHANGELOG_FILENAME,
            global_filename=self.global_filename or DEFAULT_GLOBAL_CHANGELOG_FILENAME,
        )


WrittenChangelog = Union[
    ChangelogDisabled, ChangelogModule, ChangelogModuleWithOptions, ChangelogObject
]


class WrittenConfig(BaseModel):
    """The shape of a hand-written ``.changeset/config.json``.

    Absent options take their defaults; unknown keys are ignored. Every
    field is strict, so an explicit ``null`` is an invalid value.
    """

    model_config = ConfigDict(frozen=True)

    changelog: Union[_Disabled, _Module, _ModuleWithOptions, ChangelogObject] = ChangelogObject(
        generator=(DEFAULT_CHANGELOG_GENERATOR, None)
    )
    access: Literal["public", "restricted", "private"] = "restricted"
    commit: StrictBool = False
    linked: list[list[StrictStr]] = Field(default_factory=list)
    base_branch: StrictStr = Field(default="master", alias="baseBranch")

    @field_validator("access")
    @classmethod
    def private_means_restricted(cls, value: str) -> str:
        if value == "private":
            logger.warning(
                'The `access` option is set as "private", but this is actually not a valid '
                'value - the correct form is "restricted".'
            )
            return "restricted"
        return value
