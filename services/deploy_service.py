"""
Deploy Service - Redirect table, response headers and build contexts

Reads the hosting platform's TOML configuration and answers the questions
the request pipeline and the static build ask of it.
"""

import logging
import os
import re
import shlex
import tomllib
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from pydantic import ValidationError

from models import BuildContext, HeaderRule, RedirectRule
from schemas import DeployConfigSchema
from services.exceptions import DeployConfigError

logger = logging.getLogger(__name__)

_ENV_VAR_RE = re.compile(r'\$\{(\w+)\}|\$(\w+)')

DEFAULT_HEADERS = {
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
    'Referrer-Policy': 'same-origin',
    'Strict-Transport-Security': 'max-age=31536000; includeSubDomains; preload',
}


def expand_env(value: str, env: Optional[Mapping[str, str]] = None) -> str:
    """Expand ``$VAR`` and ``${VAR}``; unknown variables become empty."""
    env = os.environ if env is None else env

    def replace(match):
        name = match.group(1) or match.group(2)
        return env.get(name, '')

    return _ENV_VAR_RE.sub(replace, value)


def base_url_from_command(command: str) -> Optional[str]:
    """Pull the ``--baseUrl``/``--base-url`` argument out of a build command."""
    try:
        args = shlex.split(command)
    except ValueError:
        return None
    for i, arg in enumerate(args):
        for flag in ('--baseUrl', '--baseURL', '--base-url', '-b'):
            if arg == flag and i + 1 < len(args):
                return args[i + 1]
            if arg.startswith(flag + '='):
                return arg.split('=', 1)[1]
    return None


class DeployService:
    """Service for redirect resolution, security headers and build contexts."""

    def __init__(self, redirects: List[RedirectRule], header_rules: List[HeaderRule],
                 contexts: Dict[str, BuildContext], publish_dir: str = "public"):
        self.redirects = redirects
        self.header_rules = header_rules
        self.contexts = contexts
        self.publish_dir = publish_dir

    @classmethod
    def from_file(cls, path: Path, env: Optional[Mapping[str, str]] = None) -> "DeployService":
        """
        Load the deployment configuration file.

        A missing file yields no redirects and the default security headers.

        Raises:
            DeployConfigError: The file is not valid TOML or fails validation
        """
        if not path.exists():
            logger.warning(f"Deploy config not found, using defaults: {path}")
            return cls([], [HeaderRule('/*', dict(DEFAULT_HEADERS))], {})

        try:
            with open(path, 'rb') as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise DeployConfigError(f"{path}: invalid TOML: {e}")

        return cls.from_dict(data, env=env, source=str(path))

    @classmethod
    def from_dict(cls, data: dict, env: Optional[Mapping[str, str]] = None,
                  source: str = "<config>") -> "DeployService":
        try:
            schema = DeployConfigSchema.model_validate(data)
        except ValidationError as e:
            raise DeployConfigError(f"{source}: {e}")

        redirects = [
            RedirectRule(source=r.from_, destination=r.to, status=r.status, force=r.force)
            for r in schema.redirects
        ]
        header_rules = [HeaderRule(h.for_, dict(h.values)) for h in schema.headers]
        if not header_rules:
            header_rules = [HeaderRule('/*', dict(DEFAULT_HEADERS))]

        contexts = {}
        for name, ctx in schema.context.items():
            command = expand_env(ctx.command, env)
            base_url = base_url_from_command(command) or None
            contexts[name] = BuildContext(
                name=name,
                command=command,
                base_url=base_url,
                environment=dict(ctx.environment),
            )

        publish = schema.build.publish if schema.build else "public"
        logger.info(
            f"Deploy config loaded from {source}: {len(redirects)} redirects, "
            f"{len(header_rules)} header rules, {len(contexts)} contexts"
        )
        return cls(redirects, header_rules, contexts, publish_dir=publish)

    # ========== REDIRECTS ==========

    def resolve(self, path: str) -> Optional[RedirectRule]:
        """First rule in declaration order whose source matches ``path``."""
        return next((rule for rule in self.redirects if rule.matches(path)), None)

    def forced_redirect(self, path: str) -> Optional[RedirectRule]:
        """Rule that applies even when a page exists at ``path``."""
        rule = self.resolve(path)
        return rule if rule is not None and rule.force else None

    # ========== HEADERS ==========

    def headers_for(self, path: str) -> Dict[str, str]:
        """Merged headers of every rule matching ``path``; later rules win."""
        headers: Dict[str, str] = {}
        for rule in self.header_rules:
            if rule.matches(path):
                headers.update(rule.headers)
        return headers

    # ========== CONTEXTS ==========

    def get_context(self, name: str) -> Optional[BuildContext]:
        return self.contexts.get(name)

    def base_url_for(self, context_name: str) -> Optional[str]:
        context = self.contexts.get(context_name)
        return context.base_url if context else None

    # ========== PLATFORM FILES ==========

    def render_redirects_file(self) -> str:
        """Redirect table in the plain-text ``_redirects`` format."""
        return ''.join(rule.as_line() + '\n' for rule in self.redirects)

    def render_headers_file(self) -> str:
        """Header rules in the plain-text ``_headers`` format."""
        blocks = []
        for rule in self.header_rules:
            lines = [rule.path_pattern]
            lines.extend(f"  {name}: {value}" for name, value in rule.headers.items())
            blocks.append('\n'.join(lines))
        return '\n\n'.join(blocks) + '\n' if blocks else ''
