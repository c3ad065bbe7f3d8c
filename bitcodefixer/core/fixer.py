"""
Fix-Request Orchestrator.

Builds a prompt from a file and its diagnostics, streams a completion,
extracts the code block and replaces the whole file with it. The batch
flow runs the same steps over every matching workspace file, one at a
time.
"""

import logging
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional, Protocol

from bitcodefixer.core.ai.base import BaseAIProvider, build_messages
from bitcodefixer.core.code_extractor import extract_fix
from bitcodefixer.core.errors import EmptyFixError, UpstreamError
from bitcodefixer.core.models import BatchResult, Diagnostic, FixRequest
from bitcodefixer.core.prompts import FIX_SYSTEM_PROMPT, build_fix_prompt
from bitcodefixer.services.diagnostics_service import DiagnosticsSource
from bitcodefixer.services.file_service import DEFAULT_EXCLUDE, DEFAULT_INCLUDE

logger = logging.getLogger(__name__)

FIX_TEMPERATURE = 0.2

ProgressCallback = Callable[[int], None]


class DocumentStore(Protocol):
    def find_files(self, include: str, exclude: Optional[str]) -> List[Path]:
        ...

    def open_document(self, path: str) -> str:
        ...

    def replace_full_text(self, path: str, content: str) -> None:
        ...


async def collect_stream(fragments: AsyncIterator[str]) -> str:
    """Concatenate streamed fragments in arrival order."""
    parts: List[str] = []
    async for fragment in fragments:
        if fragment:
            parts.append(fragment)
    return "".join(parts)


class FixOrchestrator:
    """
    Requests AI fixes for files with diagnostics.

    Args:
        provider: Completion provider
        documents: Document store (read, replace, enumerate)
        diagnostics: Diagnostics source
        model: Model override; provider default when None
    """

    def __init__(
        self,
        provider: BaseAIProvider,
        documents: DocumentStore,
        diagnostics: DiagnosticsSource,
        model: Optional[str] = None,
    ):
        self.provider = provider
        self.documents = documents
        self.diagnostics = diagnostics
        self.model = model

    async def request_fix(self, prompt: str) -> str:
        """
        Send one fix prompt and return the extracted replacement code.

        Raises:
            UpstreamError: The completion call failed
            EmptyFixError: The response carried no code
        """
        messages = build_messages(FIX_SYSTEM_PROMPT, prompt)
        try:
            response = await collect_stream(
                self.provider.stream(messages, model=self.model, temperature=FIX_TEMPERATURE)
            )
        except Exception as e:
            logger.error(f"Error calling completion endpoint: {e}")
            raise UpstreamError(f"Failed to get AI response: {e}") from e

        fixed = extract_fix(response)
        if not fixed:
            raise EmptyFixError("Failed to extract code from AI response")
        return fixed

    async def fix_request(self, request: FixRequest) -> str:
        prompt = build_fix_prompt(request.source_text, request.diagnostics, request.file_path)
        return await self.request_fix(prompt)

    async def fix_file(self, path: Path, on_progress: Optional[ProgressCallback] = None) -> bool:
        """
        Fix a single file in place.

        Returns:
            False when the file has no diagnostics (nothing sent), True once
            the fix has been applied. Failures propagate; the file is only
            written after a non-empty fix was extracted.
        """
        diagnostics = await self.diagnostics.get_diagnostics(path)
        if not diagnostics:
            logger.info(f"No diagnostics for {path}")
            return False

        source_text = self.documents.open_document(str(path))
        await self._fix_and_apply(path, source_text, diagnostics, on_progress)
        return True

    async def fix_all(
        self,
        include: str = DEFAULT_INCLUDE,
        exclude: Optional[str] = DEFAULT_EXCLUDE,
        on_file: Optional[Callable[[Path, Optional[str]], None]] = None,
    ) -> BatchResult:
        """
        Fix every matching file that has diagnostics.

        Files are handled strictly one after another. A failure is logged,
        recorded and the batch moves on; earlier fixes are kept.

        Args:
            include: Glob of candidate files
            exclude: Glob of files to skip
            on_file: Called per attempted file with the error text (None on success)
        """
        result = BatchResult()
        files = self.documents.find_files(include, exclude)
        logger.info(f"Batch fix: {len(files)} candidate files")

        for path in files:
            key = str(path)
            try:
                diagnostics = await self.diagnostics.get_diagnostics(path)
                if not diagnostics:
                    result.skipped.append(key)
                    continue
                source_text = self.documents.open_document(key)
                await self._fix_and_apply(path, source_text, diagnostics)
            except Exception as e:
                logger.error(f"Failed to fix {key}: {e}")
                result.failed[key] = str(e)
                if on_file:
                    on_file(path, str(e))
                continue

            result.fixed.append(key)
            if on_file:
                on_file(path, None)

        logger.info(f"Batch fix done: {result.fixed_count} fixed, {len(result.failed)} failed")
        return result

    async def _fix_and_apply(
        self,
        path: Path,
        source_text: str,
        diagnostics: List[Diagnostic],
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        request = FixRequest.create(str(path), source_text, diagnostics)
        if on_progress:
            on_progress(0)
        fixed = await self.fix_request(request)
        if on_progress:
            on_progress(100)
        self.documents.replace_full_text(str(path), fixed)
        logger.info(f"Applied fix to {path} ({len(diagnostics)} diagnostics)")
