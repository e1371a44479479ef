import json
from decimal import Decimal

from constants import CORS_HEADERS


def _json_default(value):
    # DynamoDB returns every number as Decimal
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def success_response(data, status_code=200):
    """
    Generate successful API response

    Lambda Proxy Response Format: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html#api-gateway-simple-proxy-for-lambda-output-format
    """
    return {
        'statusCode': status_code,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(data, default=_json_default)
    }


def error_response(status_code, message):
    """Generate error API response"""
    return {
        'statusCode': status_code,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps({'error': message})
    }


def parse_body(event):
    """
    Decode the JSON request body of a proxy event.

    Raises:
        ValueError: if the body is missing or is not a JSON object
    """
    raw = event.get('body')
    if not raw:
        raise ValueError("Request body is required")
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Request body is not valid JSON: {e.msg}")
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body
