"""
Integration Tests for Corner Popups

Tests the server-side popup gate: which banners a page renders, the flag
cookies written with the response, and explicit dismissal.
"""

import pytest
from bs4 import BeautifulSoup

from config import TestingConfig


def popup_names(response):
    soup = BeautifulSoup(response.data, 'html.parser')
    return [div['data-popup'] for div in soup.select('.corner-popup')]


FLAG_COOKIES = ('cookieconsent', 'launchdarkly')


def set_cookie_names(response):
    """Popup flag cookies written by the response, ignoring the session cookie."""
    names = (header.split('=', 1)[0] for header in response.headers.getlist('Set-Cookie'))
    return sorted(name for name in names if name in FLAG_COOKIES)


class TestPopupGate:

    def test_first_visit_shows_chain(self, client):
        """Test: Only the consent banner, visible on load, is flagged by the server."""
        response = client.get('/')
        assert popup_names(response) == ['consent', 'ad']
        assert set_cookie_names(response) == ['cookieconsent']

    def test_chained_banner_starts_hidden(self, client):
        soup = BeautifulSoup(client.get('/').data, 'html.parser')
        consent = soup.select_one('#popup-consent')
        ad = soup.select_one('#popup-ad')

        assert not consent.has_attr('hidden')
        assert consent['data-flag'] == 'server'
        assert ad.has_attr('hidden')
        assert ad['data-after'] == 'consent'
        assert ad['data-gate'] == 'server'
        assert ad['data-flag'] == 'client'

    def test_unseen_ad_shown_on_next_visit(self, client):
        """Test: Leaving before the chained ad appears doesn't suppress it."""
        client.get('/')
        response = client.get('/first-post/')

        assert popup_names(response) == ['ad']
        assert set_cookie_names(response) == []
        assert client.get_cookie('launchdarkly') is None

    def test_visit_after_ad_seen_shows_nothing(self, client):
        """Test: Once popups.js has flagged the ad, no popup renders."""
        client.get('/')
        client.set_cookie('launchdarkly', 'true')
        response = client.get('/first-post/')

        assert popup_names(response) == []
        assert set_cookie_names(response) == []
        assert b'/js/popups.js' not in response.data

    def test_consent_flagged_ad_pending(self, client):
        client.set_cookie('cookieconsent', 'true')
        response = client.get('/')
        assert popup_names(response) == ['ad']
        assert set_cookie_names(response) == []

    def test_popups_on_not_found_page(self, client):
        response = client.get('/does-not-exist/')
        assert response.status_code == 404
        assert popup_names(response) == ['consent', 'ad']

    def test_feeds_write_no_cookies(self, client):
        assert set_cookie_names(client.get('/index.json')) == []

    def test_flag_cookie_carries_cooldown(self, client):
        response = client.get('/')
        header = next(h for h in response.headers.getlist('Set-Cookie') if h.startswith('cookieconsent='))
        assert 'Max-Age=' in header
        assert 'Expires=' in header
        assert 'SameSite=Lax' in header


class TestDismiss:

    def test_dismiss_sets_cookie_and_redirects(self, client):
        response = client.post('/popups/consent/dismiss', data={'next': '/first-post/'})

        assert response.status_code == 303
        assert response.headers['Location'].endswith('/first-post/')
        assert client.get_cookie('cookieconsent').value == 'true'

    @pytest.mark.parametrize('target', ['https://evil.example.com/', '//evil.example.com/', 'javascript:alert(1)', ''])
    def test_dismiss_rejects_offsite_next(self, client, target):
        response = client.post('/popups/ad/dismiss', data={'next': target})
        assert response.status_code == 303
        assert response.headers['Location'] in ('/', 'http://localhost/')

    def test_dismiss_unknown_banner(self, client):
        assert client.post('/popups/newsletter/dismiss').status_code == 404

    def test_dismissed_banner_not_shown(self, client):
        client.post('/popups/consent/dismiss', data={'next': '/'})
        assert popup_names(client.get('/')) == ['ad']


class PopupsDisabledConfig(TestingConfig):
    POPUPS_ENABLED = False


class ConsentDisabledConfig(TestingConfig):
    CONSENT_POPUP_ENABLED = False


class ThemeVariantConfig(TestingConfig):
    POPUP_VARIANT = 'theme'


class UnknownVariantConfig(TestingConfig):
    POPUP_VARIANT = 'sidebar'


class TestPopupSettings:

    @pytest.fixture
    def make_client(self, test_config):
        from app import create_app

        def factory(overrides):
            config = type('OverrideConfig', (test_config, overrides), {})
            return create_app(config).test_client()
        return factory

    def test_popups_disabled(self, make_client):
        client = make_client(PopupsDisabledConfig)
        response = client.get('/')
        assert popup_names(response) == []
        assert set_cookie_names(response) == []

    def test_consent_disabled(self, make_client):
        client = make_client(ConsentDisabledConfig)
        soup = BeautifulSoup(client.get('/').data, 'html.parser')
        ad = soup.select_one('#popup-ad')

        assert soup.select_one('#popup-consent') is None
        assert not ad.has_attr('data-after')

    def test_theme_variant(self, make_client):
        """Test: The theme variant shows only the wide left-hand ad."""
        client = make_client(ThemeVariantConfig)
        response = client.get('/')
        soup = BeautifulSoup(response.data, 'html.parser')
        ad = soup.select_one('#popup-ad')

        assert popup_names(response) == ['ad']
        assert 'corner-popup-left' in ad['class']
        assert ad['style'] == 'width: 600px'
        assert ad['data-flag'] == 'client'
        assert set_cookie_names(response) == []

    def test_unknown_variant(self, make_client):
        with pytest.raises(ValueError, match='POPUP_VARIANT'):
            make_client(UnknownVariantConfig)
