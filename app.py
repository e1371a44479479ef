#!/usr/bin/env python3
import os
import aws_cdk as cdk
from conf_cdk_restaurant.pipeline_stack import ConfCdkPipelineStack
from conf_cdk_restaurant.settings import RestaurantSettings

# Initialize CDK application
# Documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk/App.html
app = cdk.App()

# Subdomain and source repository come from cdk.json context (or -c on the command line)
settings = RestaurantSettings.from_context(app.node)

# Create the CI/CD Pipeline Stack
# Account is required: the hosted zone lookups need a concrete environment
# Documentation: https://docs.aws.amazon.com/cdk/v2/guide/environments.html
ConfCdkPipelineStack(
    app,
    "ConfCdkPipelineStack",
    settings=settings,
    env=cdk.Environment(
        account=os.getenv('CDK_DEFAULT_ACCOUNT'),
        region=os.getenv('CDK_DEFAULT_REGION', 'eu-west-1')
    )
)

# Synthesize CloudFormation templates into cdk.out
app.synth()
