"""
Site configuration with environment-specific settings.

Usage:
    from config import get_config
    app.config.from_object(get_config())
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base directory of the site
BASE_DIR = Path(__file__).parent.resolve()


class Config:
    """Base configuration with common settings."""

    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-secret-key')

    # Site identity
    SITE_TITLE = "Reflectoring - Where the HOW meets the WHY"
    BASE_URL = os.environ.get('BASE_URL', 'http://localhost:5000')
    LANGUAGE_CODE = 'en-us'
    SITE_SHORT_NAME = "Reflectoring"
    SITE_DESCRIPTION = "Beyond busy work: software engineering tutorials, book notes and opinion."
    SITE_ENV = 'development'

    # Web app manifest
    THEME_COLOR = '#ffffff'
    BACKGROUND_COLOR = '#ffffff'
    MANIFEST_ICONS = [
        {'src': '/images/favicon-192x192.png', 'sizes': '192x192', 'type': 'image/png'},
        {'src': '/images/favicon-512x512.png', 'sizes': '512x512', 'type': 'image/png'},
    ]

    # Path configuration
    CONTENT_DIR = BASE_DIR / 'content'
    POSTS_DIR = CONTENT_DIR / 'posts'
    PAGES_DIR = CONTENT_DIR / 'pages'
    AUTHORS_FILE = BASE_DIR / 'data' / 'authors.yaml'
    STATIC_DIR = BASE_DIR / 'static'
    TEMPLATES_DIR = BASE_DIR / 'templates'
    DEPLOY_CONFIG = BASE_DIR / 'netlify.toml'
    OUTPUT_DIR = BASE_DIR / 'public'

    # Listing settings
    PAGINATE = 6
    SUMMARY_LENGTH = 20  # words
    RSS_LIMIT = 20
    BUILD_DRAFTS = False

    # Image settings
    IMAGE_FORMATS = {
        'teaser_prefix': '/assets/img/posts/',
        'teaser_suffix': '',
        'opengraph_prefix': '/assets/img/posts/',
        'opengraph_suffix': '',
    }
    IMAGE_WIDTHS = (320, 640, 960, 1280)

    # Popups: "site" chains the ad behind the consent banner, "theme" is the
    # theme's standalone ad in the left corner
    POPUPS_ENABLED = True
    CONSENT_POPUP_ENABLED = True
    POPUP_VARIANT = os.environ.get('POPUP_VARIANT', 'site')
    POPUP_BANNERS = [
        {
            'name': 'consent',
            'cookie_name': 'cookieconsent',
            'cooldown_days': 9999,
            'width': '300px',
            'content': (
                "By browsing this site you agree to our and our partners' use of "
                "cookies to process your data. For more information please check "
                "out the <a href=\"/privacy/\">Privacy Policy</a>."
            ),
        },
        {
            'name': 'ad',
            'cookie_name': 'launchdarkly',
            'cooldown_days': 7,
            'delay_ms': 30000,
            'width': '324px',
            'after': 'consent',
            'content': (
                "<a href=\"https://launchdarkly.com/state-of-feature-management\">"
                "<img width=\"300\" alt=\"State of Feature Management\" "
                "src=\"/assets/img/launchdarkly/2021_StateofFM_Ad_300x250.png\"/></a>"
            ),
        },
    ]
    THEME_POPUP_BANNERS = [
        {
            'name': 'ad',
            'cookie_name': 'launchdarkly',
            'cooldown_days': 7,
            'delay_ms': 30000,
            'width': '600px',
            'position': 'left',
            'content': (
                "<a href=\"https://launchdarkly.com/galaxy\">"
                "<img width=\"600\" alt=\"LaunchDarkly\" "
                "src=\"/images/launchdarkly/GALAXY-1200x1200-GENERAL.png\"/></a>"
            ),
        },
    ]

    # Rate limiting for popup dismissals
    RATELIMIT_STORAGE_URI = "memory://"


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False
    BUILD_DRAFTS = True
    SEND_FILE_MAX_AGE_DEFAULT = 0  # Disable caching for development


class ProductionConfig(Config):
    """Production environment configuration."""

    SITE_ENV = 'production'
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.environ.get('SECRET_KEY')
    BASE_URL = os.environ.get('BASE_URL', 'https://reflectoring.io')
    PREFERRED_URL_SCHEME = 'https'


class StagingConfig(ProductionConfig):
    """Deploy-preview configuration; base URL comes from the preview context."""

    SITE_ENV = 'staging'
    BASE_URL = os.environ.get('DEPLOY_PRIME_URL', Config.BASE_URL)


class TestingConfig(Config):
    """Testing environment configuration."""

    SITE_ENV = 'testing'
    DEBUG = True
    TESTING = True
    SECRET_KEY = 'test-secret-key-for-pytest'
    WTF_CSRF_ENABLED = False  # Disable CSRF for testing
    RATELIMIT_ENABLED = False


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'staging': StagingConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env_name=None):
    """
    Get configuration class for specified environment.

    Args:
        env_name (str): Environment name (development/production/staging/testing)
                       If None, uses SITE_ENV, then FLASK_ENV environment variables

    Returns:
        Config class for the specified environment
    """
    if env_name is None:
        env_name = os.environ.get('SITE_ENV') or os.environ.get('FLASK_ENV', 'development')

    return config.get(env_name, config['default'])
