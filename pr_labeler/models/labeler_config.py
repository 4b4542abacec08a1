"""Labeler configuration models."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_CONFIG_VERSION = 1


class LabelMatcher(BaseModel):
    """A rule tying one label to the pull request conditions that select it.

    A condition left at ``None`` (or an empty string / empty file list) is
    unspecified and imposes no constraint. Thresholds and mergeable values are
    kept as written and only interpreted when the matcher is compiled, so that
    a malformed rule surfaces as a configuration error for the whole event.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    label: str = Field(..., min_length=1)
    title: Optional[str] = None
    branch: Optional[str] = None
    mergeable: Optional[str] = None
    size_below: Optional[Union[int, str]] = Field(None, alias="size-below")
    size_above: Optional[Union[int, str]] = Field(None, alias="size-above")
    files: tuple[str, ...] = ()

    @field_validator("mergeable", mode="before")
    @classmethod
    def _normalize_mergeable(cls, value):
        # YAML turns unquoted True/False into booleans
        if isinstance(value, bool):
            return "True" if value else "False"
        return value

    @field_validator("files", mode="before")
    @classmethod
    def _normalize_files(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        return value


class LabelerConfig(BaseModel):
    """Per-repository labeler configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    version: int = 0
    matchers: tuple[LabelMatcher, ...] = Field((), alias="labels")

    @field_validator("matchers", mode="before")
    @classmethod
    def _normalize_matchers(cls, value):
        return () if value is None else value

    @property
    def managed_labels(self) -> frozenset[str]:
        """Label names governed by at least one matcher."""
        return frozenset(matcher.label for matcher in self.matchers)

    @property
    def is_supported_version(self) -> bool:
        return self.version == SUPPORTED_CONFIG_VERSION
