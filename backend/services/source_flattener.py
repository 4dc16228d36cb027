"""
Source Flattener - turn an import-laden Solidity file into one source unit

FLOW:
    raw source -> stage in a per-call scratch dir -> backend.flatten(file, import_root)
               -> registry substitution -> FlattenedSource

Flattening is best-effort. Any failure returns the original source
unchanged and is logged, so verification can still be attempted with the
best available text.

Backends operate on files, not strings:
- ImportGraphFlattener walks the import graph on disk (default)
- ForgeFlattener shells out to `forge flatten`
"""

import asyncio
import logging
import re
import subprocess
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Set, Tuple, Union

from infrastructure.config import FlattenerConfig, get_config
from infrastructure.errors import FlattenError
from .dependency_registry import DependencyRegistry, get_registry
from .verification_models import ContractSource

logger = logging.getLogger(__name__)

# group(1): the full statement, group(2): the imported path
IMPORT_RE = re.compile(r"""^[ \t]*(import\s[^;]*?["']([^"']+)["'][^;]*;)""", re.MULTILINE)

HEADER_LINE_RE = re.compile(
    r"^[ \t]*(?://\s*SPDX-License-Identifier:[^\n]*|pragma\s+solidity\s+[^;]*;)[ \t]*\n?",
    re.MULTILINE,
)


def find_imports(text: str) -> List[str]:
    return [m.group(1) for m in IMPORT_RE.finditer(text)]


def split_header(text: str) -> Tuple[str, str]:
    """Split SPDX and `pragma solidity` lines from the rest of the file."""
    header = ""
    for match in HEADER_LINE_RE.finditer(text):
        line = match.group(0).strip()
        header += line + "\n"
    return header, HEADER_LINE_RE.sub("", text)


class FlattenBackend(Protocol):
    def flatten(self, entry: Path, import_root: Path) -> str:
        ...


class ImportGraphFlattener:
    """
    Inline every import that resolves to a file on disk.

    Relative imports resolve against the importing file, everything else
    under ``import_root``. Each file is emitted once, dependencies first.
    Imports that do not resolve, or that resolve outside the import root
    and the staging directory, stay in the text for the registry pass.
    """

    def flatten(self, entry: Path, import_root: Path) -> str:
        entry = entry.resolve()
        text = entry.read_text(encoding="utf-8")

        roots = (import_root.resolve(), entry.parent)
        sections: List[str] = []
        body = self._inline(entry, text, roots, {entry}, sections)
        if not sections:
            return text

        header, body = split_header(body)
        parts = [header.rstrip()] if header.strip() else []
        parts.extend(sections)
        parts.append(f"// File: {entry.name}\n{body.strip()}\n")
        return re.sub(r"\n{3,}", "\n\n", "\n\n".join(parts))

    def _inline(
        self,
        path: Path,
        text: str,
        roots: Tuple[Path, ...],
        handled: Set[Path],
        sections: List[str],
    ) -> str:
        def visit(match: re.Match) -> str:
            import_path = match.group(2)
            target = self._resolve(path, import_path, roots)
            if target is None:
                return match.group(0)

            if target not in handled:
                handled.add(target)
                dep_text = target.read_text(encoding="utf-8")
                dep_body = self._inline(target, dep_text, roots, handled, sections)
                _, dep_body = split_header(dep_body)
                sections.append(f"// File: {import_path}\n{dep_body.strip()}\n")
            return ""

        return IMPORT_RE.sub(visit, text)

    @staticmethod
    def _resolve(importer: Path, import_path: str, roots: Tuple[Path, ...]) -> Optional[Path]:
        """Resolve an import to a file under the import root or the staging dir, else None."""
        if import_path.startswith("."):
            candidate = (importer.parent / import_path).resolve()
        else:
            candidate = (roots[0] / import_path).resolve()

        if not candidate.is_file():
            return None
        if not any(candidate.is_relative_to(root) for root in roots):
            logger.warning(f"Import {import_path!r} points outside the import root, leaving it unresolved")
            return None
        return candidate


class ForgeFlattener:
    """Delegate to Foundry's `forge flatten`, run from the project root."""

    def __init__(self, binary: str = "forge", timeout: float = 60.0):
        self.binary = binary
        self.timeout = timeout

    def flatten(self, entry: Path, import_root: Path) -> str:
        try:
            result = subprocess.run(
                [self.binary, "flatten", str(entry)],
                cwd=str(import_root.parent),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise FlattenError(f"Could not run {self.binary} flatten", details=str(e)) from e

        if result.returncode != 0:
            raise FlattenError(
                f"{self.binary} flatten exited with status {result.returncode}",
                details=result.stderr.strip()[:2000],
            )
        return result.stdout


def build_backend(settings: FlattenerConfig) -> FlattenBackend:
    if settings.backend == "import_graph":
        return ImportGraphFlattener()
    if settings.backend == "forge":
        return ForgeFlattener(settings.forge_binary, settings.forge_timeout)
    raise ValueError(f"Unknown flatten backend: {settings.backend!r}")


@dataclass(frozen=True)
class FlattenedSource:
    """
    Result of a flatten call. ``source`` is the original ContractSource
    whenever ``flattened`` is False.
    """
    source: ContractSource
    flattened: bool
    unresolved_imports: Tuple[str, ...] = ()
    error: Optional[str] = None

    @property
    def text(self) -> str:
        return self.source.text


class SourceFlattener:
    """
    Usage:
        flattener = SourceFlattener()
        result = await flattener.flatten_async(ContractSource(text), "MyToken")
        result.text  # single self-contained source (or the original on failure)
    """

    def __init__(
        self,
        backend: Optional[FlattenBackend] = None,
        registry: Optional[DependencyRegistry] = None,
        import_root: Optional[Union[str, Path]] = None,
        scratch_dir: Optional[Union[str, Path]] = None,
    ):
        settings = get_config().flattener
        self.backend = backend or build_backend(settings)
        self.registry = registry or get_registry()
        self.import_root = Path(import_root or settings.import_root).resolve()
        self.scratch_dir = scratch_dir if scratch_dir is not None else settings.scratch_dir

    def flatten(self, source: ContractSource, contract_name: str) -> FlattenedSource:
        if not IMPORT_RE.search(source.text):
            return FlattenedSource(source=source, flattened=False)

        try:
            with self._staged(source, contract_name) as staged_path:
                candidate = self.backend.flatten(staged_path, self.import_root)
            resolved = self.registry.substitute(candidate)
        except Exception as e:
            logger.error(f"Error flattening contract {contract_name}, using original source: {e}")
            return FlattenedSource(source=source, flattened=False, error=str(e) or type(e).__name__)

        unresolved = tuple(find_imports(resolved))
        if unresolved:
            logger.warning(f"{contract_name}: {len(unresolved)} import(s) left unresolved after flattening")

        logger.info(f"Flattened {contract_name}: {len(source.text)} -> {len(resolved)} chars")
        return FlattenedSource(
            source=source.with_text(resolved),
            flattened=True,
            unresolved_imports=unresolved,
        )

    async def flatten_async(self, source: ContractSource, contract_name: str) -> FlattenedSource:
        """Run the disk-bound flatten in a worker thread."""
        return await asyncio.to_thread(self.flatten, source, contract_name)

    @contextmanager
    def _staged(self, source: ContractSource, contract_name: str) -> Iterator[Path]:
        """Write the source into a scratch dir unique to this call; removed on exit."""
        safe_name = re.sub(r"\W", "_", contract_name) or "Contract"
        if self.scratch_dir is not None:
            Path(self.scratch_dir).mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory(prefix=f"flatten-{safe_name}-", dir=self.scratch_dir) as workdir:
            staged_path = Path(workdir) / f"{safe_name}.sol"
            staged_path.write_text(source.text, encoding="utf-8")
            yield staged_path
