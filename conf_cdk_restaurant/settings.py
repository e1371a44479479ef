"""
Deployment settings for the restaurant conference app.

One subdomain drives the bucket name, the CloudFront alias and the Route 53
record, so it is read once here and passed explicitly to every stack.

Values are resolved from (first match wins):
1. CDK context, e.g. `cdk synth -c subdomain=my-handle`
2. Environment variables (RESTAURANT_SUBDOMAIN, ...)
3. The defaults below

CDK context documentation: https://docs.aws.amazon.com/cdk/v2/guide/context.html
"""

import os
import re
from dataclasses import dataclass
from typing import Optional

from constructs import Node

# Change the subdomain into something else before the first deploy, this will be
# your subdomain. For uniqueness, use your GitHub handle.
PLACEHOLDER_SUBDOMAIN = "restaurant-changeit"

PARENT_DOMAIN = "cloud101.nl"

# CloudFront only accepts ACM certificates issued in us-east-1
CERTIFICATE_REGION = "us-east-1"

DEFAULT_REPO = "changeit/conf-cdk-restaurant"
DEFAULT_BRANCH = "main"
DEFAULT_GITHUB_TOKEN_SECRET = "github-token"
DEFAULT_WEBSITE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "website"))

# Single DNS label, lowercase so it is also a valid S3 bucket name segment
_SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$")

# (context key, environment variable, dataclass field)
_SOURCES = [
    ("subdomain", "RESTAURANT_SUBDOMAIN", "subdomain"),
    ("parentDomain", "RESTAURANT_PARENT_DOMAIN", "parent_domain"),
    ("repo", "RESTAURANT_REPO", "repo"),
    ("branch", "RESTAURANT_BRANCH", "branch"),
    ("githubTokenSecret", "RESTAURANT_GITHUB_TOKEN_SECRET", "github_token_secret"),
    ("websiteDir", "RESTAURANT_WEBSITE_DIR", "website_dir"),
]


def validate_subdomain(subdomain: str) -> str:
    """
    Check that the subdomain is a single lowercase DNS label.

    Raises:
        ValueError: if the value cannot be used as bucket name and record name
    """
    if not isinstance(subdomain, str) or not _SUBDOMAIN_PATTERN.match(subdomain):
        raise ValueError(
            f"Invalid subdomain {subdomain!r}: use 1-63 lowercase letters, digits "
            f"or hyphens, not starting or ending with a hyphen"
        )
    return subdomain


@dataclass(frozen=True)
class RestaurantSettings:
    """
    Settings shared by the pipeline, the stage and the application stacks.

    Attributes:
        subdomain: Prefix under the parent domain, must be globally unique.
        parent_domain: Existing Route 53 hosted zone the site lives under.
        certificate_region: Region the distribution certificate is issued in.
        repo: GitHub "owner/repo" watched by the pipeline.
        branch: Branch that triggers the pipeline on push.
        github_token_secret: Secrets Manager secret holding the GitHub token.
        website_dir: Local directory uploaded verbatim to the bucket.
    """

    subdomain: str = PLACEHOLDER_SUBDOMAIN
    parent_domain: str = PARENT_DOMAIN
    certificate_region: str = CERTIFICATE_REGION
    repo: str = DEFAULT_REPO
    branch: str = DEFAULT_BRANCH
    github_token_secret: str = DEFAULT_GITHUB_TOKEN_SECRET
    website_dir: str = DEFAULT_WEBSITE_DIR

    def __post_init__(self):
        validate_subdomain(self.subdomain)

    @property
    def domain_name(self) -> str:
        """Bucket name and CloudFront alias, e.g. my-handle.cloud101.nl"""
        return f"{self.subdomain}.{self.parent_domain}"

    @property
    def record_name(self) -> str:
        """Fully qualified Route 53 record name (trailing dot)"""
        return f"{self.domain_name}."

    @property
    def is_placeholder(self) -> bool:
        return self.subdomain == PLACEHOLDER_SUBDOMAIN

    @classmethod
    def from_context(cls, node: Optional[Node] = None) -> "RestaurantSettings":
        """
        Build settings from CDK context and environment variables.

        Args:
            node: construct node to read context from (usually app.node)
        """
        kwargs = {}
        for context_key, env_var, field in _SOURCES:
            value = node.try_get_context(context_key) if node is not None else None
            if value is None:
                value = os.getenv(env_var)
            if value is not None:
                kwargs[field] = str(value)
        return cls(**kwargs)
