from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigError

CLOUDHERDER_DEPLOYMENT_ENV = "CLOUDHERDER_DEPLOYMENT_ENV"
CLOUDHERDER_DEPLOYMENT_NAME = "CLOUDHERDER_DEPLOYMENT_NAME"
CLOUDHERDER_REGION = "CLOUDHERDER_REGION"
CLOUDHERDER_PREFIX_TEMPLATE = "CLOUDHERDER_PREFIX_TEMPLATE"

DEFAULT_PREFIX_TEMPLATE = "pu-{env}-{name}"
REGION_ENV_NAMES = (CLOUDHERDER_REGION, "AWS_REGION", "CDK_DEFAULT_REGION")


def _env_or_none(environ: Mapping[str, str], *names: str) -> str | None:
    for n in names:
        v = (environ.get(n) or "").strip()
        if v:
            return v
    return None


def _require_str(val: str | None, name: str, *, hint: str) -> str:
    v = (val or "").strip()
    if not v:
        raise ConfigError(f"missing {name} ({hint})")
    return v


def insert_service_id(service_id: str | None) -> str:
    if service_id:
        return f"-{service_id}"
    return ""


def capitalize_word(word: str) -> str:
    text = str(word)
    return text[:1].upper() + text[1:]


def build_resource_prefix(
    deployment_env: str,
    deployment_name: str,
    service_id: str | None = None,
    *,
    template: str = DEFAULT_PREFIX_TEMPLATE,
) -> str:
    try:
        base = template.format(env=deployment_env, name=deployment_name)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(
            f"invalid resource prefix template {template!r}: only {{env}} and {{name}} are allowed"
        ) from e
    return f"{base}{insert_service_id(service_id)}"


@dataclass(frozen=True)
class DeploymentConfig:
    deployment_env: str
    deployment_name: str
    region: str
    prefix_template: str = DEFAULT_PREFIX_TEMPLATE

    def __post_init__(self) -> None:
        _require_str(self.deployment_env, "deployment env", hint=f"env {CLOUDHERDER_DEPLOYMENT_ENV}")
        _require_str(self.deployment_name, "deployment name", hint=f"env {CLOUDHERDER_DEPLOYMENT_NAME}")
        _require_str(self.region, "region", hint=f"env {' or '.join(REGION_ENV_NAMES)}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DeploymentConfig":
        env = os.environ if environ is None else environ
        return cls(
            deployment_env=_require_str(
                _env_or_none(env, CLOUDHERDER_DEPLOYMENT_ENV),
                "deployment env",
                hint=f"set {CLOUDHERDER_DEPLOYMENT_ENV}",
            ),
            deployment_name=_require_str(
                _env_or_none(env, CLOUDHERDER_DEPLOYMENT_NAME),
                "deployment name",
                hint=f"set {CLOUDHERDER_DEPLOYMENT_NAME}",
            ),
            region=_require_str(
                _env_or_none(env, *REGION_ENV_NAMES),
                "region",
                hint=f"set one of {', '.join(REGION_ENV_NAMES)}",
            ),
            prefix_template=_env_or_none(env, CLOUDHERDER_PREFIX_TEMPLATE) or DEFAULT_PREFIX_TEMPLATE,
        )

    def resource_prefix(self, service_id: str | None = None) -> str:
        return build_resource_prefix(
            self.deployment_env,
            self.deployment_name,
            service_id,
            template=self.prefix_template,
        )
