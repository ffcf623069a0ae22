import pytest
from unittest.mock import AsyncMock

from apinodes.config import NodeSettings
from apinodes.credentials import StaticCredentialProvider
from apinodes.transport import TransportResponse


@pytest.fixture
def settings():
    """Settings independent of the developer's environment and .env files."""
    return NodeSettings(_env_file=None, page_size=100, max_pages=None)


@pytest.fixture
def credentials():
    return StaticCredentialProvider(
        {
            "deepLApi": {"apiKey": "deepl-key"},
            "lemlistApi": {"apiKey": "lemlist-key"},
            "googleAnalyticsOAuth2": {"accessToken": "ga-token"},
        }
    )


@pytest.fixture
def transport():
    """A transport double; every call answers 200 with an empty object by default."""
    mock = AsyncMock()
    mock.send.return_value = TransportResponse(status_code=200, data={})
    return mock

