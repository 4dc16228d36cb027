"""
Dependency Registry Tests
Exact-match lookup, substitution and JSON loading

Run: python -m pytest tests/test_dependency_registry.py -v
"""

import json
import pytest

from services.dependency_registry import (
    CONTEXT_SOURCE,
    DEFAULT_REGISTRY,
    IERC165_SOURCE,
    DependencyRegistry,
    load_registry,
)

CONTEXT_IMPORT = 'import {Context} from "../utils/Context.sol";'
IERC165_IMPORT = 'import {IERC165} from "../../utils/introspection/IERC165.sol";'


class TestLookup:

    def test_known_import_returns_inline_source(self):
        assert DEFAULT_REGISTRY.lookup(CONTEXT_IMPORT) == CONTEXT_SOURCE
        assert DEFAULT_REGISTRY.lookup(IERC165_IMPORT) == IERC165_SOURCE

    def test_unknown_import_is_none(self):
        assert DEFAULT_REGISTRY.lookup('import "@openzeppelin/contracts/token/ERC20/ERC20.sol";') is None

    def test_match_is_exact_not_semantic(self):
        """Same file, different spelling: not a hit"""
        assert DEFAULT_REGISTRY.lookup("import {Context} from '../utils/Context.sol';") is None
        assert CONTEXT_IMPORT in DEFAULT_REGISTRY

    def test_registry_is_versioned(self):
        assert DEFAULT_REGISTRY.name == "openzeppelin-contracts"
        assert DEFAULT_REGISTRY.version == "5.0"
        assert len(DEFAULT_REGISTRY) == 2


class TestSubstitute:

    def test_import_line_replaced_by_source(self):
        source = f"pragma solidity ^0.8.20;\n{CONTEXT_IMPORT}\ncontract A is Context {{}}\n"
        result = DEFAULT_REGISTRY.substitute(source)

        assert CONTEXT_IMPORT not in result
        assert "abstract contract Context {" in result
        assert result.startswith("pragma solidity ^0.8.20;\n")

    def test_repeated_import_inlined_once(self):
        source = f"{CONTEXT_IMPORT}\ncontract A {{}}\n{CONTEXT_IMPORT}\ncontract B {{}}\n"
        result = DEFAULT_REGISTRY.substitute(source)

        assert CONTEXT_IMPORT not in result
        assert result.count("abstract contract Context {") == 1

    def test_source_without_registered_imports_unchanged(self):
        source = 'import "./Local.sol";\ncontract A {}\n'
        assert DEFAULT_REGISTRY.substitute(source) == source

    def test_entries_copied_on_construction(self):
        entries = {"import \"a.sol\";": "contract A {}"}
        registry = DependencyRegistry("custom", "1", entries)
        entries["import \"b.sol\";"] = "contract B {}"

        assert len(registry) == 1
        with pytest.raises(TypeError):
            registry._entries["import \"c.sol\";"] = "contract C {}"


class TestLoadRegistry:

    def test_load_from_json(self, tmp_path):
        path = tmp_path / "registry.json"
        path.write_text(json.dumps({
            "name": "solmate",
            "version": "6.2",
            "entries": {'import {Owned} from "../auth/Owned.sol";': "abstract contract Owned {}"},
        }))

        registry = load_registry(path)

        assert registry.name == "solmate"
        assert registry.version == "6.2"
        assert registry.lookup('import {Owned} from "../auth/Owned.sol";') == "abstract contract Owned {}"

    def test_missing_entries_rejected(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"name": "broken"}))

        with pytest.raises(ValueError):
            load_registry(path)
