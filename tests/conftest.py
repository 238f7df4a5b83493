import pytest
from dotenv import load_dotenv

from iris_mcp.config import IrisSettings

load_dotenv()


@pytest.fixture
def iris_settings() -> IrisSettings:
    """Settings for a server that is never contacted; requests go through mock transports."""
    return IrisSettings(url="http://iris.test:52773", namespace="USER", username="tester", password="secret")
