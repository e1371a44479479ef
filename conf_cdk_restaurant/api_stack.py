"""
Restaurant API Stack
Backend REST APIs routed through the CloudFront distribution of the frontend

AWS Services Used:
- Amazon API Gateway: one REST API per CloudFront path pattern
  Documentation: https://docs.aws.amazon.com/apigateway/latest/developerguide/welcome.html
- AWS Lambda: proxy handlers in ./modules
  Documentation: https://docs.aws.amazon.com/lambda/latest/dg/welcome.html
- Amazon DynamoDB: event and settings storage
  Documentation: https://docs.aws.amazon.com/amazondynamodb/latest/developerguide/Introduction.html

Routes:
- /api/restaurant -> event_api    (RestaurantEventLambda)
- /api/settings   -> settings_api (SettingsLambda)
"""

import os

from aws_cdk import (
    Stack,
    Duration,
    RemovalPolicy,
    CfnOutput,
    aws_lambda as lambda_,
    aws_iam as iam,
    aws_dynamodb as dynamodb,
    aws_apigateway as apigateway,
)
from constructs import Construct

from modules.constants import (
    ENV_EVENTS_TABLE,
    ENV_SETTINGS_TABLE,
    EVENT_KEY,
    SETTINGS_KEY,
)
from .settings import RestaurantSettings

LAMBDA_SOURCE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "modules"))


class RestaurantApiStack(Stack):
    """
    Declares the event and settings APIs consumed by RestaurantFrontendStack.

    `event_api` and `settings_api` are the values handed to the frontend as its
    /api/restaurant and /api/settings origins.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: RestaurantSettings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        prefix = settings.subdomain

        # ========================================================================
        # DYNAMODB TABLES
        # ========================================================================
        # Table documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_dynamodb/Table.html
        events_table = dynamodb.Table(
            self, "RestaurantEventsTable",
            partition_key=dynamodb.Attribute(
                name=EVENT_KEY,
                type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY,
            table_name=f"{prefix}-RestaurantEvents"
        )

        settings_table = dynamodb.Table(
            self, "RestaurantSettingsTable",
            partition_key=dynamodb.Attribute(
                name=SETTINGS_KEY,
                type=dynamodb.AttributeType.STRING
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY,
            table_name=f"{prefix}-RestaurantSettings"
        )

        # ========================================================================
        # LAMBDA FUNCTIONS
        # ========================================================================
        # Both handlers ship from the same asset; the handler string selects the module
        # Code.from_asset documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_lambda/Code.html#aws_cdk.aws_lambda.Code.from_asset
        code = lambda_.Code.from_asset(LAMBDA_SOURCE_DIR, exclude=["__pycache__", "*.pyc"])

        event_lambda = lambda_.Function(
            self, "RestaurantEventLambda",
            runtime=lambda_.Runtime.PYTHON_3_11,
            handler="RestaurantEventLambda.lambda_handler",
            code=code,
            timeout=Duration.seconds(30),
            function_name=f"{prefix}-RestaurantEvents",
            description=f"[{prefix}] Restaurant events API",
            environment={
                ENV_EVENTS_TABLE: events_table.table_name
            }
        )
        events_table.grant_read_write_data(event_lambda)

        settings_lambda = lambda_.Function(
            self, "RestaurantSettingsLambda",
            runtime=lambda_.Runtime.PYTHON_3_11,
            handler="SettingsLambda.lambda_handler",
            code=code,
            timeout=Duration.seconds(30),
            function_name=f"{prefix}-RestaurantSettings",
            description=f"[{prefix}] Restaurant settings API",
            environment={
                ENV_SETTINGS_TABLE: settings_table.table_name
            }
        )
        settings_table.grant_read_write_data(settings_lambda)

        # IAM ROLE: API Gateway CloudWatch Logging
        # Required once per account/region before stages can log at INFO level
        # CfnAccount documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_apigateway/CfnAccount.html
        api_log_role = iam.Role(
            self, "ApiGatewayCloudWatchLogsRole",
            assumed_by=iam.ServicePrincipal("apigateway.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AmazonAPIGatewayPushToCloudWatchLogs"
                )
            ]
        )
        api_account = apigateway.CfnAccount(
            self, "ApiGatewayAccount",
            cloud_watch_role_arn=api_log_role.role_arn
        )

        # ========================================================================
        # API GATEWAY: one proxy REST API per CloudFront behavior
        # ========================================================================
        # LambdaRestApi documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_apigateway/LambdaRestApi.html
        self.event_api = apigateway.LambdaRestApi(
            self, "EventApi",
            handler=event_lambda,
            rest_api_name=f"{prefix}-RestaurantEventApi",
            description=f"[{prefix}] Restaurant events, served under /api/restaurant",
            # ApiGatewayAccount above owns the logging role
            cloud_watch_role=False,
            deploy_options=self._stage_options()
        )

        self.settings_api = apigateway.LambdaRestApi(
            self, "SettingsApi",
            handler=settings_lambda,
            rest_api_name=f"{prefix}-RestaurantSettingsApi",
            description=f"[{prefix}] Restaurant settings, served under /api/settings",
            cloud_watch_role=False,
            deploy_options=self._stage_options()
        )

        # Stages log through the account-level role, so it must exist first
        for api in (self.event_api, self.settings_api):
            api.deployment_stage.node.add_dependency(api_account)

        # ========================================================================
        # CLOUDFORMATION OUTPUTS
        # ========================================================================
        CfnOutput(
            self, "EventApiUrl",
            value=self.event_api.url,
            description=f"[{prefix}] Restaurant events API URL"
        )
        CfnOutput(
            self, "SettingsApiUrl",
            value=self.settings_api.url,
            description=f"[{prefix}] Restaurant settings API URL"
        )
        CfnOutput(
            self, "EventsTableName",
            value=events_table.table_name
        )
        CfnOutput(
            self, "SettingsTableName",
            value=settings_table.table_name
        )

    @staticmethod
    def _stage_options() -> apigateway.StageOptions:
        # StageOptions documentation: https://docs.aws.amazon.com/cdk/api/v2/python/aws_cdk.aws_apigateway/StageOptions.html
        return apigateway.StageOptions(
            stage_name="prod",
            metrics_enabled=True,
            logging_level=apigateway.MethodLoggingLevel.INFO,
            tracing_enabled=True,
        )
