"""
Pytest Configuration and Fixtures

Provides shared fixtures for testing the site using the application
factory pattern against a small fixture site under tests/fixtures/site.
"""

import pytest
from datetime import date, datetime, timezone
from pathlib import Path

from config import TestingConfig


FIXTURE_SITE = Path(__file__).parent / 'fixtures' / 'site'


class FixtureSiteConfig(TestingConfig):
    """Testing configuration pointed at the fixture site."""

    BASE_URL = 'https://example.org'
    POSTS_DIR = FIXTURE_SITE / 'posts'
    PAGES_DIR = FIXTURE_SITE / 'pages'
    AUTHORS_FILE = FIXTURE_SITE / 'authors.yaml'
    STATIC_DIR = FIXTURE_SITE / 'static'
    DEPLOY_CONFIG = FIXTURE_SITE / 'netlify.toml'
    PAGINATE = 2
    SUMMARY_LENGTH = 5
    IMAGE_FORMATS = {
        'teaser_prefix': '/images/',
        'teaser_suffix': '',
        'opengraph_prefix': '/images/',
        'opengraph_suffix': '',
    }


@pytest.fixture(scope='session')
def test_config():
    """Test configuration class."""
    return FixtureSiteConfig


@pytest.fixture
def app(test_config):
    """
    Create and configure a Flask application instance for testing.

    Uses the application factory pattern to create a clean instance
    for each test function.
    """
    from app import create_app
    app = create_app(test_config)

    # Push application context
    ctx = app.app_context()
    ctx.push()

    yield app

    # Clean up
    ctx.pop()


@pytest.fixture
def client(app):
    """
    Flask test client for making HTTP requests.

    Provides a test client that can make requests to the application
    without running a live server.
    """
    return app.test_client()


@pytest.fixture
def runner(app):
    """
    Flask CLI test runner.

    Provides a runner for testing CLI commands.
    """
    return app.test_cli_runner()


@pytest.fixture
def blog_service(test_config):
    """BlogService loaded from the fixture site."""
    from services import BlogService
    return BlogService(
        posts_dir=test_config.POSTS_DIR,
        pages_dir=test_config.PAGES_DIR,
        paginate=test_config.PAGINATE,
        summary_length=test_config.SUMMARY_LENGTH,
    ).load()


@pytest.fixture
def author_service(test_config):
    """AuthorService loaded from the fixture registry."""
    from services import AuthorService
    return AuthorService(test_config.AUTHORS_FILE)


@pytest.fixture
def image_service(test_config):
    """ImageService resolving against the fixture static directory."""
    from services import ImageService
    return ImageService(
        static_dir=test_config.STATIC_DIR,
        base_url=test_config.BASE_URL,
        image_formats=test_config.IMAGE_FORMATS,
        widths=test_config.IMAGE_WIDTHS,
    )


@pytest.fixture
def deploy_service(test_config):
    """DeployService loaded from the fixture netlify.toml."""
    from services import DeployService
    return DeployService.from_file(test_config.DEPLOY_CONFIG, env={'DEPLOY_PRIME_URL': 'https://preview.example.org'})


class FakeClock:
    """Controllable clock for cool-down tests."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        from datetime import timedelta
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def popup_gate(clock):
    """PopupGate with the default consent + ad chain and a fake clock."""
    from services import PopupGate
    return PopupGate.from_config(TestingConfig.POPUP_BANNERS, clock=clock)


@pytest.fixture
def sample_article():
    """Sample Article model for testing."""
    from models import Article
    return Article(
        slug='test-article',
        title='Test Article',
        date=date(2024, 1, 15),
        body='One two three four five six seven eight.',
        categories=['Testing'],
    )
