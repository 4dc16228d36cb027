"""
Dependency Registry - inline sources for well-known imports

The flattener resolves imports from files on disk. Some imports point at
packages that are declared by the project but never materialised on disk,
so their text is kept here, keyed by the exact import statement.

Keys match by exact string comparison. This is a lookup table, not an
import resolver.
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from infrastructure.config import get_config

logger = logging.getLogger(__name__)


IERC165_SOURCE = """/**
 * @dev Interface of the ERC-165 standard, as defined in the
 * https://eips.ethereum.org/EIPS/eip-165[ERC].
 *
 * Implementers can declare support of contract interfaces, which can then be
 * queried by others ({ERC165Checker}).
 *
 * For an implementation, see {ERC165}.
 */
interface IERC165 {
    /**
     * @dev Returns true if this contract implements the interface defined by
     * `interfaceId`. See the corresponding
     * https://eips.ethereum.org/EIPS/eip-165#how-interfaces-are-identified[ERC section]
     * to learn more about how these ids are created.
     *
     * This function call must use less than 30 000 gas.
     */
    function supportsInterface(bytes4 interfaceId) external view returns (bool);
}"""

CONTEXT_SOURCE = """/**
 * @dev Provides information about the current execution context, including the
 * sender of the transaction and its data. While these are generally available
 * via msg.sender and msg.data, they should not be accessed in such a direct
 * manner, since when dealing with meta-transactions the account sending and
 * paying for execution may not be the actual sender (as far as an application
 * is concerned).
 *
 * This contract is only required for intermediate, library-like contracts.
 */
abstract contract Context {
    function _msgSender() internal view virtual returns (address) {
        return msg.sender;
    }

    function _msgData() internal view virtual returns (bytes calldata) {
        return msg.data;
    }

    function _contextSuffixLength() internal view virtual returns (uint256) {
        return 0;
    }
}"""

OPENZEPPELIN_V5_ENTRIES = {
    'import {IERC165} from "../../utils/introspection/IERC165.sol";': IERC165_SOURCE,
    'import {Context} from "../utils/Context.sol";': CONTEXT_SOURCE,
}


class DependencyRegistry:
    """
    Immutable, versioned map of import statement -> inline source.

    Usage:
        registry = DependencyRegistry("openzeppelin", "5.0", entries)
        source = registry.substitute(flattened_text)
    """

    def __init__(self, name: str, version: str, entries: Mapping[str, str]):
        self.name = name
        self.version = version
        self._entries = MappingProxyType(dict(entries))

    def lookup(self, import_statement: str) -> Optional[str]:
        """Inline source for an exact import statement, or None."""
        return self._entries.get(import_statement)

    def substitute(self, source: str) -> str:
        """
        Replace every registered import statement found in ``source``.

        The first occurrence becomes the inline source; later occurrences of
        the same statement are dropped so the definition appears once.
        """
        resolved = source
        for statement, inline_source in self._entries.items():
            if statement not in resolved:
                continue
            head, _, tail = resolved.partition(statement)
            resolved = head + inline_source + tail.replace(statement, "")
            logger.debug(f"Inlined registry entry: {statement}")
        return resolved

    def keys(self):
        return self._entries.keys()

    def __contains__(self, import_statement: object) -> bool:
        return import_statement in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DependencyRegistry(name={self.name!r}, version={self.version!r}, entries={len(self)})"


DEFAULT_REGISTRY = DependencyRegistry("openzeppelin-contracts", "5.0", OPENZEPPELIN_V5_ENTRIES)


def load_registry(path: Union[str, Path]) -> DependencyRegistry:
    """
    Load a registry from a JSON file:

        {"name": "...", "version": "...", "entries": {"<import>": "<source>"}}
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    entries = data.get("entries")
    if not isinstance(entries, dict):
        raise ValueError(f"Registry file {path} has no 'entries' object")

    registry = DependencyRegistry(
        name=str(data.get("name") or Path(path).stem),
        version=str(data.get("version") or "0"),
        entries={str(k): str(v) for k, v in entries.items()},
    )
    logger.info(f"Loaded dependency registry {registry.name}@{registry.version} ({len(registry)} entries)")
    return registry


_registry: Optional[DependencyRegistry] = None


def get_registry() -> DependencyRegistry:
    """Get the process-wide registry (configured file or the built-in table)."""
    global _registry
    if _registry is None:
        registry_path = get_config().flattener.registry_path
        _registry = load_registry(registry_path) if registry_path else DEFAULT_REGISTRY
    return _registry
