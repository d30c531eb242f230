"""Shared fixtures for the proxy test suite."""

from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from zkcash.app.config import Settings
from zkcash.app.main import create_app
from zkcash.app.upstream import JupiterClient

ALLOWED_ORIGIN = "https://app.zkcash.test"


@pytest.fixture
def mock_settings():
    """Settings isolated from any local .env file"""
    return Settings(
        _env_file=None,
        CORS_ORIGINS=f"{ALLOWED_ORIGIN}, http://localhost:5173",
        RPC_URL="http://rpc.test",
        JUPITER_QUOTE_API_URL="http://jupiter.test/v6",
        JUPITER_TOKEN_LIST_URL="http://tokens.test/all",
        SLIPPAGE_BPS=50,
    )


@pytest.fixture
def mock_http():
    """Stand-in for the shared httpx.AsyncClient used by JupiterClient"""
    http = AsyncMock(spec=httpx.AsyncClient)
    return http


@pytest.fixture
def jupiter(mock_http, mock_settings):
    return JupiterClient(
        mock_http,
        quote_api_url=mock_settings.JUPITER_QUOTE_API_URL,
        token_list_url=mock_settings.JUPITER_TOKEN_LIST_URL,
    )


@pytest.fixture
def mock_rpc():
    """Stand-in for SolanaRpcClient"""
    rpc = AsyncMock()
    rpc.get_signature_statuses = AsyncMock(return_value=[None])
    return rpc


@pytest.fixture
def app(mock_settings, jupiter, mock_rpc):
    return create_app(mock_settings, jupiter=jupiter, rpc=mock_rpc)


@pytest.fixture
def client(app):
    return TestClient(app)

