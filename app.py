"""
Reflectoring - Where the HOW meets the WHY

Flask application factory: wires the content, author, image, deploy and
popup services into blueprints, applies the redirect table and security
headers, and exposes the ``flask build`` static-export command.
"""
import os
from pathlib import Path

import click
from flask import Flask, render_template, redirect, request, g, current_app

from config import get_config
from extensions import csrf, limiter
from models import normalize_path
from routes import main_bp, taxonomy_bp, feeds_bp, popups_bp
from services import (
    AuthorService,
    BlogService,
    BuildService,
    DeployService,
    ImageService,
    PopupGate,
    SiteError,
)
from utils.logger import setup_logger


def init_services(app):
    """Load content and configuration into services stored on the app."""
    config = app.config

    blog_service = BlogService(
        posts_dir=Path(config['POSTS_DIR']),
        pages_dir=Path(config['PAGES_DIR']),
        paginate=config['PAGINATE'],
        summary_length=config['SUMMARY_LENGTH'],
        include_drafts=config['BUILD_DRAFTS'],
    )
    try:
        blog_service.load()
        author_service = AuthorService(Path(config['AUTHORS_FILE']))
        deploy_service = DeployService.from_file(Path(config['DEPLOY_CONFIG']))
    except SiteError as e:
        app.logger.error(f"Site failed to load: {e}")
        raise

    app.extensions['blog_service'] = blog_service
    app.extensions['author_service'] = author_service
    app.extensions['deploy_service'] = deploy_service
    app.extensions['image_service'] = ImageService(
        static_dir=Path(config['STATIC_DIR']),
        base_url=config['BASE_URL'],
        image_formats=config['IMAGE_FORMATS'],
        widths=config['IMAGE_WIDTHS'],
    )
    popup_variants = {'site': config['POPUP_BANNERS'], 'theme': config['THEME_POPUP_BANNERS']}
    if config['POPUP_VARIANT'] not in popup_variants:
        raise ValueError(f"Unknown POPUP_VARIANT '{config['POPUP_VARIANT']}' (expected site or theme)")
    app.extensions['popup_gate'] = PopupGate.from_config(
        popup_variants[config['POPUP_VARIANT']] if config['POPUPS_ENABLED'] else [],
        consent_enabled=config['CONSENT_POPUP_ENABLED'],
    )


def _serves_content(path):
    """True unless ``path`` is a single-segment URL with no article or page."""
    blog_service = current_app.extensions['blog_service']
    slug = normalize_path(path).strip('/')
    if not slug or '/' in slug or '.' in slug:
        return True
    return blog_service.get_article(slug) is not None or blog_service.get_page(slug) is not None


def popup_decision():
    """Per-request popup decision, computed once and reused by templates."""
    if 'popup_decision' not in g:
        popup_gate = current_app.extensions['popup_gate']
        cookies = None if current_app.config.get('STATIC_BUILD') else request.cookies
        g.popup_decision = popup_gate.evaluate(cookies)
    return g.popup_decision


def register_request_hooks(app):
    @app.before_request
    def reset_popup_decision():
        """Requests can share an app context (test client, static build)."""
        g.pop('popup_decision', None)

    @app.before_request
    def apply_redirects():
        """Forced rules always redirect; others only where no content exists."""
        deploy_service = app.extensions['deploy_service']
        rule = deploy_service.forced_redirect(request.path)
        if rule is None and not _serves_content(request.path):
            rule = deploy_service.resolve(request.path)
        if rule is not None:
            app.logger.info(f"Redirect {request.path} -> {rule.destination} ({rule.status})")
            return redirect(rule.destination, code=rule.status)

    @app.after_request
    def set_security_headers(response):
        """Apply the configured headers to all responses."""
        deploy_service = app.extensions['deploy_service']
        for name, value in deploy_service.headers_for(request.path).items():
            response.headers[name] = value
        return response

    @app.after_request
    def write_popup_flags(response):
        """Flag popups visible on load; deferred and delayed ones are flagged by popups.js."""
        decision = g.get('popup_decision')
        if decision is None or app.config.get('STATIC_BUILD'):
            return response
        for flag in decision.flags:
            response.set_cookie(
                flag.name, flag.value, max_age=flag.max_age, expires=flag.expires,
                path='/', samesite='Lax',
            )
        return response

    @app.errorhandler(404)
    def page_not_found(e):
        """Unforced redirects for multi-segment paths, else the 404 page."""
        deploy_service = app.extensions['deploy_service']
        rule = deploy_service.resolve(request.path)
        if rule is not None:
            return redirect(rule.destination, code=rule.status)
        return render_template("404.html"), 404


def register_template_helpers(app):
    image_service = app.extensions['image_service']
    blog_service = app.extensions['blog_service']
    author_service = app.extensions['author_service']

    app.jinja_env.filters['teaser'] = image_service.teaser
    app.jinja_env.filters['opengraph'] = image_service.opengraph
    app.jinja_env.filters['absolute_url'] = lambda path: image_service.absolute_url(
        path, app.config['BASE_URL']
    )
    app.jinja_env.globals['picture'] = image_service.picture
    app.jinja_env.globals['summary'] = blog_service.summary
    app.jinja_env.globals['resolve_authors'] = author_service.resolve
    app.jinja_env.globals['popup_decision'] = popup_decision

    @app.context_processor
    def inject_site():
        return {
            'site_title': app.config['SITE_TITLE'],
            'base_url': app.config['BASE_URL'],
            'language_code': app.config['LANGUAGE_CODE'],
            'site_env': app.config['SITE_ENV'],
            'static_build': app.config.get('STATIC_BUILD', False),
        }


def register_commands(app):
    @app.cli.command("build")
    @click.option('--context', 'context_name', default=None,
                  help="Deploy context whose base URL and environment to use (production, deploy-preview).")
    @click.option('--base-url', default=None, help="Absolute site URL; overrides the context.")
    @click.option('--output', default=None, type=click.Path(file_okay=False, path_type=Path),
                  help="Output directory (default: OUTPUT_DIR setting).")
    @click.option('--clean/--no-clean', default=True, help="Empty the output directory first.")
    def build_command(context_name, base_url, output, clean):
        """Render the whole site to static files."""
        deploy_service = app.extensions['deploy_service']

        site_env = None
        if context_name is not None:
            context = deploy_service.get_context(context_name)
            if context is None:
                raise click.BadParameter(f"unknown context '{context_name}'", param_hint='--context')
            base_url = base_url or context.base_url
            site_env = context.site_env

        try:
            report = BuildService(app).build(
                Path(output or app.config['OUTPUT_DIR']),
                base_url=base_url,
                clean=clean,
                site_env=site_env,
            )
        except SiteError as e:
            raise click.ClickException(str(e))

        click.echo(f"Built {report.page_count} pages into {report.output_dir} for {report.base_url} ({report.site_env})")


def create_app(config_class=None):
    """
    Create and configure the site application.

    Args:
        config_class: Config class to use; defaults to the environment's

    Returns:
        Configured Flask application
    """
    config_class = config_class or get_config()
    app = Flask(
        __name__,
        static_folder=str(config_class.STATIC_DIR),
        static_url_path='',
        template_folder=str(config_class.TEMPLATES_DIR),
    )
    app.config.from_object(config_class)

    if not app.config.get('SECRET_KEY'):
        raise ValueError(
            "SECRET_KEY environment variable is required!\n"
            "Generate one with: python -c 'import secrets; print(secrets.token_hex(32))'"
        )

    setup_logger(app)
    csrf.init_app(app)
    limiter.init_app(app)

    init_services(app)
    register_request_hooks(app)
    register_template_helpers(app)
    register_commands(app)

    app.register_blueprint(main_bp)
    app.register_blueprint(taxonomy_bp)
    app.register_blueprint(feeds_bp)
    app.register_blueprint(popups_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = app.config.get('DEBUG', False)
    env_name = os.environ.get('SITE_ENV') or os.environ.get('FLASK_ENV', 'development')

    print("=" * 60)
    print("Reflectoring Site Starting")
    print(f"Environment: {env_name}")
    print(f"Debug Mode: {debug_mode}")
    print("=" * 60)

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', 5000))

    app.run(host=host, port=port, debug=debug_mode)
