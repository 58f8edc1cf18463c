import pytest

TEST_API_KEY = "0123456789abcdef0123456789abcdef"
TEST_PRIVATE_KEY = "0x" + "11" * 32


@pytest.fixture
def secrets_env(monkeypatch):
    monkeypatch.setenv("INFURA_API_KEY", TEST_API_KEY)
    monkeypatch.setenv("SEPOLIA_PRIVATE_KEY", TEST_PRIVATE_KEY)


@pytest.fixture
def no_secrets_env(monkeypatch):
    # set first so monkeypatch also removes whatever .env loading puts back
    for name in ("INFURA_API_KEY", "SEPOLIA_PRIVATE_KEY"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
