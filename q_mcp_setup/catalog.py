"""Canonical MCP provider set installed on every run.

The table below is the built-in default configuration. Each entry lists
exactly the fields it writes; field presence in mcp.json mirrors these
templates. The git repository research provider is the only conditional
entry: it is included, with the token in its env, only when a GitHub
token is available.
"""

from __future__ import annotations

from typing import Any, Optional

from q_mcp_setup.constants import GIT_RESEARCH_PROVIDER, GIT_RESEARCH_TOKEN_ENV
from q_mcp_setup.models import APPROVE_ALL, ProviderDefinition

_AWS_ENV = {"AWS_PROFILE": "default", "FASTMCP_LOG_LEVEL": "ERROR"}


def _uvx(package: str, *extra_args: str, **fields: Any) -> dict[str, Any]:
    return {"command": "uvx", "args": [package, *extra_args], **fields}


_CANONICAL_TEMPLATES: dict[str, dict[str, Any]] = {
    "awslabs.aws-diagram-mcp-server": _uvx(
        "awslabs.aws-diagram-mcp-server@latest",
        env=_AWS_ENV, autoApprove=[APPROVE_ALL], disabled=False,
    ),
    "awslabs.aws-documentation-mcp-server": _uvx(
        "awslabs.aws-documentation-mcp-server@latest",
        env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.cdk-mcp-server": _uvx(
        "awslabs.cdk-mcp-server@latest",
        env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.core-mcp-server": _uvx(
        "awslabs.core-mcp-server@latest",
        env=_AWS_ENV, autoApprove=[APPROVE_ALL], disabled=False,
    ),
    "awslabs.cost-analysis-mcp-server": _uvx(
        "awslabs.cost-analysis-mcp-server@latest",
        env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.nova-canvas-mcp-server": _uvx(
        "awslabs.nova-canvas-mcp-server@latest",
        env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.aws-location-mcp-server": _uvx(
        "awslabs.aws-location-mcp-server@latest",
        env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.git-research": _uvx(
        "awslabs.git-repo-research-mcp-server@latest",
        env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.cloudformation": _uvx(
        "awslabs.cfn-mcp-server@latest",
        env={"AWS_PROFILE": "default"}, disabled=False, autoApprove=[APPROVE_ALL],
    ),
    "awslabs.aws-serverless-mcp-server": _uvx(
        "awslabs.aws-serverless-mcp-server@latest",
        "--allow-write",
        "--allow-sensitive-data-access",
        env={"AWS_PROFILE": "default"}, disabled=False, autoApprove=[], timeout=60,
    ),
    "awslabs.syntheticdata-mcp-server": _uvx(
        "awslabs.syntheticdata-mcp-server@latest",
        env={"FASTMCP_LOG_LEVEL": "ERROR", "AWS_PROFILE": "default"},
        autoApprove=[], disabled=False,
    ),
    "awslabs.code-doc-gen-mcp-server": _uvx(
        "awslabs.code-doc-gen-mcp-server@latest",
        env={"FASTMCP_LOG_LEVEL": "ERROR"}, disabled=False, autoApprove=[],
    ),
    "awslabs.frontend-mcp-server": _uvx(
        "awslabs.frontend-mcp-server@latest",
        env={"FASTMCP_LOG_LEVEL": "ERROR"}, disabled=False, autoApprove=[],
    ),
    "awslabs.dynamodb-mcp-server": _uvx(
        "awslabs.dynamodb-mcp-server@latest",
        env={
            "DDB-MCP-READONLY": "true",
            "AWS_PROFILE": "default",
            "FASTMCP_LOG_LEVEL": "ERROR",
        },
        disabled=False, autoApprove=[],
    ),
    "duckduckgo": _uvx("ddg-mcp-server"),
    "strands": _uvx("strands-agents-mcp-server"),
}

_GIT_RESEARCH_TEMPLATE: dict[str, Any] = _uvx(
    "awslabs.git-repo-research-mcp-server@latest",
    env=_AWS_ENV, disabled=False, autoApprove=[APPROVE_ALL],
)


def canonical_names(secret: Optional[str] = None) -> list[str]:
    """Return the provider names ``build()`` would produce for *secret*."""
    names = list(_CANONICAL_TEMPLATES)
    if secret:
        names.append(GIT_RESEARCH_PROVIDER)
    return names


def build(secret: Optional[str] = None) -> dict[str, ProviderDefinition]:
    """Build a fresh copy of the canonical provider set.

    Args:
        secret: GitHub token. When non-empty, the git repository research
            provider is added with the token under ``GITHUB_TOKEN``.

    Returns:
        Ordered mapping of provider name to definition.
    """
    providers = {
        name: ProviderDefinition.model_validate(template)
        for name, template in _CANONICAL_TEMPLATES.items()
    }
    if secret:
        template = dict(_GIT_RESEARCH_TEMPLATE)
        template["env"] = {**template["env"], GIT_RESEARCH_TOKEN_ENV: secret}
        providers[GIT_RESEARCH_PROVIDER] = ProviderDefinition.model_validate(template)
    return providers
