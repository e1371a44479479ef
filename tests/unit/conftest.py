"""
Shared fixtures for CDK synthesis tests.

Stacks are built inside a ConfCdkPipelineStage, the same way the pipeline builds
them. A concrete account is required because the hosted zone lookups refuse
environment-agnostic stacks; without cached context they resolve to dummy values.
"""

import aws_cdk as cdk
import pytest

from conf_cdk_restaurant.pipeline_stage import ConfCdkPipelineStage
from conf_cdk_restaurant.settings import RestaurantSettings

ACCOUNT = "123456789012"
REGION = "eu-west-1"
SUBDOMAIN = "octocat"


@pytest.fixture
def env():
    return cdk.Environment(account=ACCOUNT, region=REGION)


@pytest.fixture
def settings():
    return RestaurantSettings(subdomain=SUBDOMAIN)


@pytest.fixture
def stage(env, settings):
    app = cdk.App()
    return ConfCdkPipelineStage(app, "Deploy", settings=settings, env=env)
