import json
import os
import re
from datetime import datetime, timezone

import boto3

from constants import DEFAULT_SETTINGS, ENV_SETTINGS_TABLE, SETTINGS_ID, SETTINGS_KEY, SETTINGS_PATH
from http_responses import error_response, parse_body, success_response

dynamodb = boto3.resource('dynamodb')
table = dynamodb.Table(os.environ[ENV_SETTINGS_TABLE])

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def lambda_handler(event, context):
    """
    Restaurant settings API behind CloudFront path /api/settings.

    GET      /api/settings - current settings merged over the defaults
    PUT/POST /api/settings - update one or more settings
    """
    print(f"Received event: {json.dumps(event)}")

    try:
        http_method = event['httpMethod']
        path = (event.get('path') or '').rstrip('/')

        if path == SETTINGS_PATH:
            if http_method == 'GET':
                return get_settings()
            elif http_method in ('PUT', 'POST'):
                return update_settings(parse_body(event))
            return error_response(405, f"Method {http_method} not allowed")

        return error_response(404, "Route not found")

    except ValueError as e:
        return error_response(400, str(e))
    except Exception as e:
        print(f"Error: {str(e)}")
        return error_response(500, f"Internal error: {str(e)}")


def load_settings():
    response = table.get_item(Key={SETTINGS_KEY: SETTINGS_ID})
    stored = response.get('Item', {})

    settings = dict(DEFAULT_SETTINGS)
    settings.update({key: value for key, value in stored.items() if key in DEFAULT_SETTINGS})
    if 'updated_at' in stored:
        settings['updated_at'] = stored['updated_at']
    return settings


def get_settings():
    """
    GET /api/settings

    DynamoDB GetItem: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/table/get_item.html
    """
    return success_response(load_settings())


def update_settings(data):
    """
    PUT /api/settings - Store the given settings on top of the current document

    DynamoDB PutItem: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/table/put_item.html
    """
    changes = validate_settings(data)

    settings = load_settings()
    settings.update(changes)

    if _minutes(settings['openingTime']) >= _minutes(settings['closingTime']):
        raise ValueError("openingTime must be before closingTime")

    settings['updated_at'] = datetime.now(timezone.utc).isoformat()
    table.put_item(Item={SETTINGS_KEY: SETTINGS_ID, **settings})
    print(f"Updated settings: {sorted(changes)}")

    return success_response(settings)


def validate_settings(data):
    """
    Validate a partial settings document.

    Raises:
        ValueError: on unknown keys or values of the wrong type
    """
    unknown = sorted(set(data) - set(DEFAULT_SETTINGS))
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")
    if not data:
        raise ValueError("No settings given")

    if 'restaurantName' in data:
        name = data['restaurantName']
        if not isinstance(name, str) or not name.strip():
            raise ValueError("restaurantName must be a non-empty string")

    for key in ('openingTime', 'closingTime'):
        if key in data and (not isinstance(data[key], str) or not _TIME_PATTERN.match(data[key])):
            raise ValueError(f"{key} must use the HH:MM format")

    if 'maxGuests' in data:
        guests = data['maxGuests']
        if isinstance(guests, bool) or not isinstance(guests, int) or guests < 1:
            raise ValueError("maxGuests must be a positive integer")

    if 'reservationsOpen' in data and not isinstance(data['reservationsOpen'], bool):
        raise ValueError("reservationsOpen must be true or false")

    return dict(data)


def _minutes(value):
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)
