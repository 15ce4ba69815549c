import os
import sys
import tempfile
from pathlib import Path
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Configure test environment: throwaway sqlite database, no metrics server, no redis
TMP_DIR = tempfile.mkdtemp(prefix='kinship-tests-')
os.environ['DATABASE_URL'] = f"sqlite+aiosqlite:///{os.path.join(TMP_DIR, 'kinship_test.db')}"
os.environ['UPLOAD_DIR'] = os.path.join(TMP_DIR, 'friend_photos')
os.environ['METRICS_PORT'] = '0'
os.environ.pop('REDIS_URL', None)

# Ensure the package root is on sys.path when pytest changes CWD to this tests dir
HERE = Path(__file__).resolve()
PKG_ROOT = HERE.parents[2]
if str(PKG_ROOT) not in sys.path:
    sys.path.insert(0, str(PKG_ROOT))

from kinship.main import app  # noqa: E402
from kinship.models import create_all, drop_all  # noqa: E402


@pytest_asyncio.fixture(autouse=True)
async def fresh_db():
    await drop_all()
    await create_all()
    yield


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac


async def register_and_login(ac, email='alice@example.com', password='secret1', first_name='Alice'):
    r = await ac.post('/api/auth/register', json={
        'email': email,
        'password': password,
        'first_name': first_name,
        'last_name': 'Tester',
    })
    assert r.status_code == 201, r.text
    login = await ac.post('/api/auth/login', data={'username': email, 'password': password})
    assert login.status_code == 200, login.text
    # headers take precedence over the session cookie the client now carries
    return {'Authorization': f"Bearer {login.json()['access_token']}"}


@pytest_asyncio.fixture
async def auth_headers(client):
    return await register_and_login(client)


@pytest.fixture
def png_bytes():
    from io import BytesIO
    from PIL import Image

    def make(size=(64, 64), color=(200, 120, 90)):
        buf = BytesIO()
        Image.new('RGB', size, color).save(buf, format='PNG')
        return buf.getvalue()
    return make


@pytest.fixture
def login_as(client):
    """Register another account on the shared client and return its auth headers"""
    async def _login(email, password='secret1', first_name=None):
        return await register_and_login(client, email=email, password=password, first_name=first_name or email.split('@')[0].title())
    return _login
