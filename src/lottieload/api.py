"""Public API for lottieload.

High-level functions that load a composition from a path, a stream or raw
bytes and return a complete, structured result. Callers should use these
instead of importing from _internal.
"""

import asyncio
import enum
import logging
import os
import zipfile
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import BinaryIO, Callable, List, Optional, Sequence, Tuple, Union

from lottieload.contracts import LoadDiagnostics, LoadOptions, LoadResult
from lottieload.errors import LottieLoadError, ParseFailedError, StreamUnavailableError
from lottieload.kernel.composition import Composition
from lottieload.kernel.optimizer import optimize
from lottieload.kernel.reader import read_composition
from lottieload.kernel.validator import validate_composition
from lottieload._internal.diagnostics import DiagnosticsRecorder
from lottieload._internal.io.dispatch import Source, select_provider
from lottieload._internal.io.provider import StreamProvider
from lottieload._internal.io.storage import StorageProvider

logger = logging.getLogger(__name__)

RawIssues = Sequence[Tuple[str, str]]
Parser = Callable[[BinaryIO], Tuple[Optional[Composition], RawIssues]]
Optimizer = Callable[[Composition], Composition]
Validator = Callable[[Composition], RawIssues]


class LoadPhase(str, enum.Enum):
    """Sequential phases of a single load."""
    DISPATCHED = "dispatched"
    STREAM_ACQUIRED = "stream_acquired"
    PARSED = "parsed"
    ASSETS_RESOLVED = "assets_resolved"
    OPTIMIZED = "optimized"
    VALIDATED = "validated"
    COMPLETE = "complete"


class _LoadRun:
    """State for one load call. Not shared between calls."""

    def __init__(
        self,
        provider: StreamProvider,
        options: LoadOptions,
        parser: Optional[Parser],
        optimizer: Optional[Optimizer],
        validator: Optional[Validator],
    ) -> None:
        self.provider = provider
        self.options = options
        self.parser = parser or read_composition
        self.optimizer = optimizer or optimize
        self.validator = validator or validate_composition
        self.phase = LoadPhase.DISPATCHED
        self.recorder: Optional[DiagnosticsRecorder] = None
        if LoadOptions.INCLUDE_DIAGNOSTICS in options:
            self.recorder = DiagnosticsRecorder(options=options, file_name=provider.display_name)

    def _advance(self, phase: LoadPhase) -> None:
        self.phase = phase
        logger.debug("Load %r: %s", self.provider.display_name, phase.value)

    def acquire_stream(self) -> BinaryIO:
        stream = self.provider.open_stream()
        if stream is None:
            raise StreamUnavailableError(f"No stream available for {self.provider.display_name!r}")
        if self.recorder is not None:
            self.recorder.record_read()
        self._advance(LoadPhase.STREAM_ACQUIRED)
        return stream

    def parse(self, stream: BinaryIO) -> Tuple[Optional[Composition], List[Tuple[str, str]]]:
        """Runs on a worker thread."""
        try:
            composition, issues = self.parser(stream)
        except (OSError, zipfile.BadZipFile) as e:
            raise StreamUnavailableError(f"Could not read {self.provider.display_name!r}: {e}") from e
        return composition, list(issues)

    def finish(self, composition: Optional[Composition], issues: List[Tuple[str, str]]) -> LoadResult:
        if self.recorder is not None:
            self.recorder.record_parse(issues)
        if composition is None:
            raise ParseFailedError(f"Could not read a composition from {self.provider.display_name!r}")
        self._advance(LoadPhase.PARSED)

        self.provider.resolve_assets(composition)
        self._advance(LoadPhase.ASSETS_RESOLVED)

        # The optimizer may return a new instance; only its result is used from here on.
        composition = self.optimizer(composition)
        self._advance(LoadPhase.OPTIMIZED)

        diagnostics: Optional[LoadDiagnostics] = None
        if self.recorder is not None:
            self.recorder.composition = composition
            self.recorder.record_validation(self.validator(composition))
            self._advance(LoadPhase.VALIDATED)
            diagnostics = self.recorder.finish()

        self._advance(LoadPhase.COMPLETE)
        return LoadResult(composition=composition, diagnostics=diagnostics)

    def fail(self, error: LottieLoadError) -> None:
        logger.warning(
            "Load of %r failed after %s: %s", self.provider.display_name, self.phase.value, error
        )


def _run(
    provider: StreamProvider,
    options: LoadOptions,
    parser: Optional[Parser],
    optimizer: Optional[Optimizer],
    validator: Optional[Validator],
    executor: Optional[Executor],
) -> LoadResult:
    run = _LoadRun(provider, options, parser, optimizer, validator)
    try:
        with provider:
            stream = run.acquire_stream()
            if executor is not None:
                parsed = executor.submit(run.parse, stream).result()
            else:
                with ThreadPoolExecutor(max_workers=1, thread_name_prefix="lottieload-parse") as pool:
                    parsed = pool.submit(run.parse, stream).result()
            return run.finish(*parsed)
    except LottieLoadError as e:
        run.fail(e)
        raise


async def _run_async(
    provider: StreamProvider,
    options: LoadOptions,
    parser: Optional[Parser],
    optimizer: Optional[Optimizer],
    validator: Optional[Validator],
    executor: Optional[Executor],
) -> LoadResult:
    run = _LoadRun(provider, options, parser, optimizer, validator)
    try:
        with provider:
            stream = run.acquire_stream()
            # Parsing large documents can take significant time; keep it off the event loop.
            loop = asyncio.get_running_loop()
            parsed = await loop.run_in_executor(executor, run.parse, stream)
            return run.finish(*parsed)
    except LottieLoadError as e:
        run.fail(e)
        raise


def load(
    source: Source,
    options: LoadOptions = LoadOptions.ALL,
    *,
    parser: Optional[Parser] = None,
    optimizer: Optional[Optimizer] = None,
    validator: Optional[Validator] = None,
    executor: Optional[Executor] = None,
) -> LoadResult:
    """Load a composition from a path (.json, .zip, .lottie), a binary stream or bytes.

    Parsing runs on a worker thread (a private single-thread pool unless
    ``executor`` is given), but the caller still blocks until the whole load
    finishes. Use load_async() to keep the calling thread free while parsing.
    Raises a LottieLoadError subclass on fatal errors.
    Diagnostics are attached to the result when ``options`` includes
    INCLUDE_DIAGNOSTICS.
    """
    provider = select_provider(source)
    return _run(provider, options, parser, optimizer, validator, executor)


async def load_async(
    source: Source,
    options: LoadOptions = LoadOptions.ALL,
    *,
    parser: Optional[Parser] = None,
    optimizer: Optional[Optimizer] = None,
    validator: Optional[Validator] = None,
    executor: Optional[Executor] = None,
) -> LoadResult:
    """Async form of load(); parsing runs in ``executor`` (the loop default if None)."""
    provider = select_provider(source)
    return await _run_async(provider, options, parser, optimizer, validator, executor)


def _storage_provider(source: Union[str, os.PathLike, BinaryIO, None]) -> StorageProvider:
    if isinstance(source, (str, os.PathLike)):
        return StorageProvider.from_path(source)
    return StorageProvider.from_stream(source)


def load_storage(
    source: Union[str, os.PathLike, BinaryIO, None],
    options: LoadOptions = LoadOptions.ALL,
    *,
    parser: Optional[Parser] = None,
    optimizer: Optional[Optimizer] = None,
    validator: Optional[Validator] = None,
    executor: Optional[Executor] = None,
) -> LoadResult:
    """Load through the storage-backed provider from a file name or a caller-owned stream.

    The file is read as JSON whatever its extension, and no asset resolution
    is performed. A None stream raises StreamUnavailableError.
    """
    provider = _storage_provider(source)
    return _run(provider, options, parser, optimizer, validator, executor)


async def load_storage_async(
    source: Union[str, os.PathLike, BinaryIO, None],
    options: LoadOptions = LoadOptions.ALL,
    *,
    parser: Optional[Parser] = None,
    optimizer: Optional[Optimizer] = None,
    validator: Optional[Validator] = None,
    executor: Optional[Executor] = None,
) -> LoadResult:
    provider = _storage_provider(source)
    return await _run_async(provider, options, parser, optimizer, validator, executor)


def load_composition(source: Source, options: LoadOptions = LoadOptions.NONE) -> Composition:
    """Load and return only the composition."""
    return load(source, options).composition

