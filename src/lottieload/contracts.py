"""Public result models for lottieload."""

import enum
from datetime import timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from lottieload.kernel.composition import Composition


class LoadOptions(enum.Flag):
    """Options controlling a load."""
    NONE = 0
    INCLUDE_DIAGNOSTICS = 1
    ALL = INCLUDE_DIAGNOSTICS


class Issue(BaseModel):
    """A non-fatal issue reported by the parser or the validator."""
    code: str
    description: str

    model_config = ConfigDict(frozen=True)


class LoadDiagnostics(BaseModel):
    """Instrumentation for a single load. Only produced with INCLUDE_DIAGNOSTICS."""
    file_name: str = ""
    read_time: timedelta = timedelta(0)
    parse_time: timedelta = timedelta(0)
    validation_time: timedelta = timedelta(0)
    json_parsing_issues: List[Issue] = []
    validation_issues: List[Issue] = []
    composition: Optional[Composition] = None
    options: LoadOptions = LoadOptions.NONE

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def total_time(self) -> timedelta:
        return self.read_time + self.parse_time + self.validation_time


class LoadResult(BaseModel):
    """The loaded composition, with diagnostics when they were requested."""
    composition: Composition
    diagnostics: Optional[LoadDiagnostics] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
