import json
import os
import tempfile
import threading
from unittest.mock import Mock, patch

import pandas as pd
import pytest
import yaml

from quackspace import set_secret_providers
from quackspace.config import ConnectionConfig
from quackspace.connection import RackspaceConnection
from quackspace.context import QueryContext
from quackspace.secrets import EnvSecretProvider

IDENTITY_ENDPOINT = "https://identity.api.rackspacecloud.com/v2.0"
TOKENS_URL = IDENTITY_ENDPOINT + "/tokens"
COMPUTE_URL = "https://hkg.servers.api.rackspacecloud.com/v2/555"
IMAGE_URL = "https://hkg.images.api.rackspacecloud.com"
STORAGE_URL = "https://storage101.hkg1.clouddrive.com/v1/MossoCloudFS_555"
DNS_URL = "https://dns.api.rackspacecloud.com/v1.0/555"

_REASONS = {200: "OK", 201: "Created", 204: "No Content", 401: "Unauthorized", 404: "Not Found", 500: "Server Error"}


def make_response(status_code=200, body=None, headers=None):
    """Builds a Mock shaped like a requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.reason = _REASONS.get(status_code, "")
    response.content = b"" if body is None else json.dumps(body).encode()
    response.json.return_value = body
    response.headers = headers or {}
    return response


class FakeHttp:
    """
    Stands in for requests.Session. Responses are queued per (method, url) and
    handed out in order; a request with nothing queued fails the test.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self._lock = threading.Lock()

    def add(self, method, url, *responses):
        self.routes.setdefault((method, url), []).extend(responses)
        return self

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        with self._lock:
            self.calls.append(Mock(method=method, url=url, headers=headers, params=params, json=json, timeout=timeout))
            queued = self.routes.get((method, url))
            if not queued:
                raise AssertionError(f"unexpected request: {method} {url} params={params}")
            return queued.pop(0)

    def factory(self):
        return self

    def urls(self, method=None):
        return [c.url for c in self.calls if method is None or c.method == method]


def identity_body():
    return {
        "access": {
            "token": {"id": "tok-123", "expires": "2026-10-18T00:00:00Z", "tenant": {"id": "555"}},
            "serviceCatalog": [
                {"type": "compute", "name": "cloudServersOpenStack",
                 "endpoints": [{"region": "HKG", "publicURL": COMPUTE_URL}]},
                {"type": "image", "name": "cloudImages",
                 "endpoints": [{"region": "HKG", "publicURL": IMAGE_URL}]},
                {"type": "object-store", "name": "cloudFiles",
                 "endpoints": [{"region": "HKG", "publicURL": STORAGE_URL}]},
            ],
        }
    }


@pytest.fixture(autouse=True)
def reset_secret_providers():
    """Reset secret providers after each test."""
    yield
    # Reset to default after each test
    set_secret_providers([EnvSecretProvider()])


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield tmp_dir


@pytest.fixture
def fake_http():
    return FakeHttp()


@pytest.fixture
def authed_http(fake_http):
    """A fake HTTP layer that accepts one token exchange."""
    return fake_http.add("POST", TOKENS_URL, make_response(200, identity_body()))


@pytest.fixture
def rax_config():
    return ConnectionConfig(
        name="rax",
        identity_endpoint=IDENTITY_ENDPOINT,
        tenant_id="555",
        token_id="tok-123",
        region="hkg",
    )


@pytest.fixture
def rax_conn(rax_config, fake_http):
    return RackspaceConnection(rax_config, http_factory=fake_http.factory)


@pytest.fixture
def ctx():
    return QueryContext()


@pytest.fixture
def sample_config_dict():
    """Sample configuration dictionary for testing."""
    return {
        'connections': {
            'rax_prod': {
                'identity_endpoint': IDENTITY_ENDPOINT,
                'tenant_id': 555,
                'region': 'HKG',
                'secret_name': 'rax_prod',
                'tables': ['rackspace_compute', 'rackspace_dns_domain'],
            },
            'rax_files': {
                'secret_name': 'rax_files',
                'timeout': 30,
                'tables': {
                    'rackspace_cloud_files_object': {'container_name': 'backups'},
                },
            },
        }
    }


@pytest.fixture
def sample_yaml_config(temp_dir, sample_config_dict):
    """Create a temporary YAML config file."""
    config_path = os.path.join(temp_dir, 'test_config.yml')
    with open(config_path, 'w') as f:
        yaml.dump(sample_config_dict, f)
    return config_path


@pytest.fixture
def mock_duckdb_connection():
    """Mock DuckDB connection for testing."""
    mock_con = Mock()
    mock_con.execute = Mock()
    mock_con.register = Mock()
    mock_con.install_extension = Mock()
    mock_con.load_extension = Mock()
    mock_con.close = Mock()

    # Mock fetchdf for pandas integration
    mock_result = Mock()
    mock_result.fetchdf.return_value = pd.DataFrame({'name': ['example.com'], 'ttl': [300]})
    mock_con.execute.return_value = mock_result

    return mock_con


@pytest.fixture
def mock_connect(mock_duckdb_connection):
    with patch('quackspace.core.duckdb.connect', return_value=mock_duckdb_connection) as mock:
        yield mock


@pytest.fixture
def env_secrets():
    """Set up environment variables for testing."""
    env_vars = {
        'RAX_PROD_TOKEN_ID': 'env-token',
        'RAX_PROD_TENANT_ID': '555',
        'RAX_FILES_TOKEN_ID': 'files-token',
        'RAX_FILES_REGION': 'IAD',
    }

    # Set environment variables
    for key, value in env_vars.items():
        os.environ[key] = value

    yield env_vars

    # Clean up
    for key in env_vars:
        os.environ.pop(key, None)


@pytest.fixture
def json_secrets_dir(temp_dir):
    """Create JSON secret files for testing."""
    secrets_dir = os.path.join(temp_dir, 'secrets')
    os.makedirs(secrets_dir)

    with open(os.path.join(secrets_dir, 'rax_prod.json'), 'w') as f:
        json.dump({
            'token_id': 'json-token',
            'tenant_id': 555,
            'identity_endpoint': IDENTITY_ENDPOINT,
            'password': 'never-read',
        }, f)

    with open(os.path.join(secrets_dir, 'broken.json'), 'w') as f:
        f.write('{not json')

    return secrets_dir
