import io

import pytest

from src.endpoint import create_app
from src.funnel import start_funnel
from src.logfile import open_log_file


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "log.txt"


@pytest.fixture
def funnel(log_path):
    f = start_funnel(open_log_file(str(log_path)), stdout=io.StringIO())
    yield f
    f.close()


@pytest.fixture
def app(funnel):
    """Create a Flask test app bound to a live funnel."""
    application = create_app(funnel)
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()
