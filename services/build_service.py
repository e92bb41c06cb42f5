"""
Build Service - Freezes the Flask site into static files

Renders every known URL through the test client, writes the responses
under the output directory and adds the hosting platform's _redirects
and _headers files.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from flask import Flask

from models import slugify
from services.exceptions import BuildError

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Outcome of a static build."""
    output_dir: Path
    base_url: str
    site_env: str = ""
    pages: List[str] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)


class BuildService:
    """Service for rendering the whole site to disk."""

    def __init__(self, app: Flask):
        self.app = app

    @property
    def blog_service(self):
        return self.app.extensions['blog_service']

    @property
    def deploy_service(self):
        return self.app.extensions['deploy_service']

    def collect_urls(self) -> List[str]:
        """Every URL the static site contains, home page first."""
        blog = self.blog_service
        urls = ['/']

        articles = blog.list_articles()
        for page in range(2, blog.page_count(articles) + 1):
            urls.append(f'/page/{page}/')

        urls.extend(article.url for article in articles)
        urls.extend(page.url for page in blog.list_pages())

        for name in blog.categories():
            base = f'/categories/{slugify(name)}/'
            urls.append(base)
            for page in range(2, blog.page_count(blog.by_category(name)) + 1):
                urls.append(f'{base}page/{page}/')

        for name in blog.tags():
            base = f'/tags/{slugify(name)}/'
            urls.append(base)
            for page in range(2, blog.page_count(blog.by_tag(name)) + 1):
                urls.append(f'{base}page/{page}/')

        urls.extend(f'/authors/{key}/' for key in blog.author_keys())
        urls.extend(['/index.xml', '/index.json', '/index.webmanifest'])
        return urls

    @staticmethod
    def output_path(output_dir: Path, url: str) -> Path:
        """``/foo/`` -> ``foo/index.html``; ``/index.xml`` -> ``index.xml``."""
        relative = url.lstrip('/')
        if not relative or relative.endswith('/'):
            return output_dir / relative / 'index.html'
        return output_dir / relative

    def build(self, output_dir: Path, base_url: Optional[str] = None,
              clean: bool = True, site_env: Optional[str] = None) -> BuildReport:
        """
        Render the site into ``output_dir``.

        Args:
            output_dir: Target directory (created if missing)
            base_url: Absolute site URL; defaults to the BASE_URL setting
            clean: Remove the output directory before writing
            site_env: Environment name templates see (defaults to SITE_ENV)

        Returns:
            BuildReport listing the written URLs

        Raises:
            BuildError: A URL did not render with status 200
        """
        base_url = base_url or self.app.config['BASE_URL']
        site_env = site_env or self.app.config['SITE_ENV']
        if clean and output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        report = BuildReport(output_dir=output_dir, base_url=base_url, site_env=site_env)
        previous = {key: self.app.config[key] for key in ('BASE_URL', 'SITE_ENV')}
        self.app.config['BASE_URL'] = base_url
        self.app.config['SITE_ENV'] = site_env
        self.app.config['STATIC_BUILD'] = True
        try:
            client = self.app.test_client()
            for url in self.collect_urls():
                self._write(client, url, self.output_path(output_dir, url), 200)
                report.pages.append(url)

            self._write(client, '/__build_404__/', output_dir / '404.html', 404)
        finally:
            self.app.config.update(previous)
            self.app.config['STATIC_BUILD'] = False

        self._copy_static(output_dir)
        (output_dir / '_redirects').write_text(
            self.deploy_service.render_redirects_file(), encoding='utf-8'
        )
        (output_dir / '_headers').write_text(
            self.deploy_service.render_headers_file(), encoding='utf-8'
        )

        logger.info(f"Built {report.page_count} pages into {output_dir} for {base_url} ({site_env})")
        return report

    def _write(self, client, url: str, target: Path, expected_status: int) -> None:
        response = client.get(url)
        if response.status_code != expected_status:
            raise BuildError(f"{url} rendered with status {response.status_code}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(response.get_data())
        logger.debug(f"Wrote {target}")

    def _copy_static(self, output_dir: Path) -> None:
        static_dir = Path(self.app.static_folder) if self.app.static_folder else None
        if static_dir is None or not static_dir.exists():
            return
        shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
