"""
Unit Tests for RestaurantApiStack
Validates the Lambda functions, tables and REST APIs behind /api/restaurant and /api/settings
"""

import aws_cdk.assertions as assertions
import pytest


@pytest.fixture
def template(stage):
    return assertions.Template.from_stack(stage.api_stack)


def test_tables_created(template):
    """One table for events, one for settings; both removed with the stack"""
    template.resource_count_is("AWS::DynamoDB::Table", 2)
    template.has_resource(
        "AWS::DynamoDB::Table",
        {
            "Properties": assertions.Match.object_like({
                "TableName": "octocat-RestaurantEvents",
                "KeySchema": [{"AttributeName": "EventId", "KeyType": "HASH"}]
            }),
            "DeletionPolicy": "Delete"
        }
    )
    template.has_resource_properties(
        "AWS::DynamoDB::Table",
        {
            "TableName": "octocat-RestaurantSettings",
            "KeySchema": [{"AttributeName": "SettingId", "KeyType": "HASH"}]
        }
    )


@pytest.mark.parametrize("handler, env_key", [
    ("RestaurantEventLambda.lambda_handler", "EVENTS_TABLE_NAME"),
    ("SettingsLambda.lambda_handler", "SETTINGS_TABLE_NAME"),
])
def test_lambda_functions(template, handler, env_key):
    template.has_resource_properties(
        "AWS::Lambda::Function",
        {
            "Runtime": "python3.11",
            "Handler": handler,
            "Timeout": 30,
            "Environment": {
                "Variables": {env_key: assertions.Match.any_value()}
            }
        }
    )


def test_two_rest_apis(template):
    template.resource_count_is("AWS::ApiGateway::RestApi", 2)
    template.has_resource_properties(
        "AWS::ApiGateway::RestApi",
        {"Name": "octocat-RestaurantEventApi"}
    )
    template.has_resource_properties(
        "AWS::ApiGateway::RestApi",
        {"Name": "octocat-RestaurantSettingsApi"}
    )


def test_stages_log_and_trace(template):
    template.has_resource_properties(
        "AWS::ApiGateway::Stage",
        {
            "StageName": "prod",
            "TracingEnabled": True,
            "MethodSettings": [
                assertions.Match.object_like({
                    "LoggingLevel": "INFO",
                    "MetricsEnabled": True
                })
            ]
        }
    )
    template.resource_count_is("AWS::ApiGateway::Account", 1)


def test_lambdas_can_write_tables(template):
    template.has_resource_properties(
        "AWS::IAM::Policy",
        {
            "PolicyDocument": {
                "Statement": assertions.Match.array_with([
                    assertions.Match.object_like({
                        "Action": assertions.Match.array_with(["dynamodb:PutItem"]),
                        "Effect": "Allow"
                    })
                ])
            }
        }
    )


def test_api_url_outputs(template):
    template.has_output("EventApiUrl", assertions.Match.any_value())
    template.has_output("SettingsApiUrl", assertions.Match.any_value())
