import pytest

from status_formatter import Account, AccountDirectory, Formatter, FormatterConfig, Status

LOCAL_DOMAIN = "cb6e6126.ngrok.io"


@pytest.fixture
def alice() -> Account:
    return Account("alice")


@pytest.fixture
def directory(alice: Account) -> AccountDirectory:
    return AccountDirectory([alice])


@pytest.fixture
def formatter(directory: AccountDirectory, local_domain: str) -> Formatter:
    return Formatter(FormatterConfig(local_domain=local_domain), resolver=directory)


@pytest.fixture
def local_status(alice: Account):
    def make(text: str) -> Status:
        return Status(text, account=alice)
    return make


@pytest.fixture
def local_domain() -> str:
    return LOCAL_DOMAIN


@pytest.fixture
def alice_mention(local_domain: str) -> str:
    return (
        f'<span class="h-card"><a href="https://{local_domain}/@alice" class="u-url mention">'
        "@<span>alice</span></a></span>"
    )
