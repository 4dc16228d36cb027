"""
Contract metadata extraction.

Derives the contract name and compiler version from lexical patterns in
the source. This is a heuristic, not a Solidity parser: files declaring
several contracts, inheritance lists split across lines or unusual pragma
expressions can yield the wrong or a partial value.
"""

import re
from typing import Optional, Protocol

from infrastructure.config import CompilerDefaults, get_config
from .verification_models import ContractMetadata

DEFAULT_CONTRACT_NAME = "Contract"

CONTRACT_NAME_RE = re.compile(r"contract\s+(\w+)")
PRAGMA_RE = re.compile(r"pragma\s+solidity\s+([^;]+);")
NON_VERSION_CHARS_RE = re.compile(r"[^\d.]")


class MetadataExtractor(Protocol):
    def extract(self, source: str) -> ContractMetadata:
        ...


class RegexMetadataExtractor:
    """
    Usage:
        extractor = RegexMetadataExtractor()
        meta = extractor.extract("pragma solidity ^0.8.19; contract Foo {}")
        # ContractMetadata(name="Foo", compiler_version="v0.8.19+commit.7dd6d404")
    """

    def __init__(self, defaults: Optional[CompilerDefaults] = None):
        self.defaults = defaults or get_config().compiler

    def extract(self, source: str) -> ContractMetadata:
        return ContractMetadata(
            name=self.extract_name(source),
            compiler_version=self.extract_compiler_version(source),
        )

    def extract_name(self, source: str) -> str:
        match = CONTRACT_NAME_RE.search(source)
        return match.group(1) if match else DEFAULT_CONTRACT_NAME

    def extract_compiler_version(self, source: str) -> str:
        match = PRAGMA_RE.search(source)
        if match:
            # "^0.8.19" -> "0.8.19"; comparison operators and carets are dropped
            version = NON_VERSION_CHARS_RE.sub("", match.group(1))
            if version:
                return f"v{version}+{self.defaults.commit_suffix}"
        return self.defaults.default_compiler_version
