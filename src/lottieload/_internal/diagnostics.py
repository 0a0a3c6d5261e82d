"""Incremental recorder for LoadDiagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, List, Optional, Tuple

from lottieload.contracts import Issue, LoadDiagnostics, LoadOptions
from lottieload.kernel.composition import Composition

from .timing import PhaseTimer


def to_issues(raw: Iterable[Tuple[str, str]]) -> List[Issue]:
    """Convert (code, description) pairs into Issue models."""
    return [Issue(code=str(code), description=str(description)) for code, description in raw]


@dataclass
class DiagnosticsRecorder:
    """Collects diagnostics as the load progresses; finish() freezes them."""
    options: LoadOptions
    file_name: str = ""
    timer: PhaseTimer = field(default_factory=PhaseTimer)
    read_time: timedelta = timedelta(0)
    parse_time: timedelta = timedelta(0)
    validation_time: timedelta = timedelta(0)
    json_parsing_issues: List[Issue] = field(default_factory=list)
    validation_issues: List[Issue] = field(default_factory=list)
    composition: Optional[Composition] = None

    def record_read(self) -> None:
        self.read_time = self.timer.elapsed_and_restart()

    def record_parse(self, issues: Iterable[Tuple[str, str]]) -> None:
        self.parse_time = self.timer.elapsed_and_restart()
        self.json_parsing_issues = to_issues(issues)

    def record_validation(self, issues: Iterable[Tuple[str, str]]) -> None:
        self.validation_time = self.timer.elapsed_and_restart()
        self.validation_issues = to_issues(issues)

    def finish(self) -> LoadDiagnostics:
        return LoadDiagnostics(
            file_name=self.file_name,
            read_time=self.read_time,
            parse_time=self.parse_time,
            validation_time=self.validation_time,
            json_parsing_issues=list(self.json_parsing_issues),
            validation_issues=list(self.validation_issues),
            composition=self.composition,
            options=self.options,
        )
