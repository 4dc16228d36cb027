"""
Pytest Configuration for Chainup Verifier Tests

Run all tests: python -m pytest tests/ -v
"""

import json
import pytest
import sys
from pathlib import Path
from typing import Callable, List

import httpx

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from infrastructure.config import ChainupConfig, CompilerDefaults, ExplorerConfig


EXPLORER_URL = "https://explorer.test"


# =============================================================================
# EXPLORER MOCK
# =============================================================================

class ExplorerMock:
    """
    Stand-in for the Blockscout explorer behind httpx.MockTransport.

    Swap ``v2``, ``rpc`` or ``status`` for a handler returning another
    response (or raising an httpx exception) to simulate failures.
    """

    def __init__(self):
        self.calls: List[str] = []
        self.requests: List[httpx.Request] = []
        self.v2: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"message": "Smart-contract verification started"}
        )
        self.rpc: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"status": "1", "message": "OK", "result": {"Address": "0xabc"}}
        )
        self.status: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"is_verified": True, "verification_status": "verified"}
        )

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path.endswith("/verification/via/flattened-code"):
            self.calls.append("v2")
            return self.v2(request)
        if request.method == "GET" and path == "/api":
            self.calls.append("rpc")
            return self.rpc(request)
        if request.method == "GET" and path.startswith("/api/v2/smart-contracts/"):
            self.calls.append("status")
            return self.status(request)
        return httpx.Response(404, text="unexpected route")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def v2_body(self) -> dict:
        for request in self.requests:
            if request.method == "POST":
                return json.loads(request.content)
        raise AssertionError("v2 endpoint was never called")


# =============================================================================
# FIXTURES - Shared across all test files
# =============================================================================

@pytest.fixture
def explorer_mock():
    return ExplorerMock()


@pytest.fixture
def settings():
    """Configuration independent of the environment"""
    config = ChainupConfig()
    config.explorer = ExplorerConfig(base_url=EXPLORER_URL, request_timeout=5.0)
    config.compiler = CompilerDefaults()
    return config


@pytest.fixture
def test_addresses():
    return {
        "token": "0x8B3d7A48Ff5301F204E91C1aC2Ccc367a78d1c42",
        "escrow": "0x68Aa2805A050A958c8CaaFE4fEC2830e9435d6d5",
    }


@pytest.fixture
def simple_source():
    return "pragma solidity ^0.8.19; contract Foo {}"


@pytest.fixture
def registry_import_source():
    """Source importing Context by a path that never exists on disk"""
    return (
        "// SPDX-License-Identifier: MIT\n"
        "pragma solidity ^0.8.20;\n"
        "\n"
        'import {Context} from "../utils/Context.sol";\n'
        "\n"
        "contract Greeter is Context {\n"
        "    function who() external view returns (address) {\n"
        "        return _msgSender();\n"
        "    }\n"
        "}\n"
    )
