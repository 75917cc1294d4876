"""
Pytest fixtures for CMS tests.

Every test gets its own storage root under tmp_path, in test mode, so
documents, uploads and credentials never leak between tests.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from cms.config import Settings, get_settings
from cms.kernel.context import RequestContext
from cms.kernel.documents import DocumentStore, PathResolver
from cms.kernel.identity import CredentialStore, IdentityService, PasswordHasher
from cms.kernel.identity.password import hash_password

TEST_USERNAME = "admin"
TEST_PASSWORD = "secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Test-mode settings rooted in a fresh temporary directory."""
    return Settings(
        environment="test",
        storage_root=str(tmp_path),
        secret_key="test-secret-key-for-testing-only",
    )


@pytest.fixture
def resolver(settings: Settings) -> PathResolver:
    return PathResolver(settings.documents_root, settings.uploads_root)


@pytest.fixture
def store(resolver: PathResolver) -> DocumentStore:
    return DocumentStore(resolver)


@pytest.fixture
def revisions(store: DocumentStore):
    return store.revisions


@pytest.fixture
def credentials(settings: Settings) -> CredentialStore:
    return CredentialStore(settings.credentials_path)


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    """Minimum bcrypt cost; hashing speed is not what these tests check."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def identity(credentials: CredentialStore, fast_hasher: PasswordHasher) -> IdentityService:
    return IdentityService(credentials, fast_hasher)


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(path="/")


@pytest.fixture
def seed_documents(settings: Settings) -> dict:
    """Write a few documents straight into the document root."""
    documents = {
        "about.md": "# Heading\n\n## Sub-heading\n\nSome text.\n",
        "changes.txt": "first line\nsecond line\n",
        "history.txt": "1993 - Yukihiro Matsumoto dreams up Ruby.\n",
    }
    settings.documents_root.mkdir(parents=True, exist_ok=True)
    for name, content in documents.items():
        (settings.documents_root / name).write_text(content, encoding="utf-8")
    return documents


@pytest.fixture
def registered_user(settings: Settings) -> tuple:
    """A credential record the app can sign in with."""
    CredentialStore(settings.credentials_path).add(TEST_USERNAME, hash_password(TEST_PASSWORD))
    return TEST_USERNAME, TEST_PASSWORD


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app, with storage pointed at tmp_path."""
    from cms.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_settings, None)


@pytest_asyncio.fixture
async def signed_in_client(client: AsyncClient, registered_user: tuple) -> AsyncClient:
    """Client whose session cookie is signed in as the test user."""
    username, password = registered_user
    response = await client.post(
        "/users/signin",
        data={"username": username, "password": password},
    )
    assert response.status_code == 302, response.text
    # Drop the "Welcome!" flash so tests see only their own messages
    await client.get("/")
    return client
