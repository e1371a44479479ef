import json
import os
import uuid
from datetime import date, datetime, timezone

import boto3

from constants import ENV_EVENTS_TABLE, EVENTS_PATH, EVENT_KEY
from http_responses import error_response, parse_body, success_response

# Initialize DynamoDB resource for table operations
# DynamoDB Resource API: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb.html#service-resource
dynamodb = boto3.resource('dynamodb')

# Table name is set by RestaurantApiStack during deployment
table = dynamodb.Table(os.environ[ENV_EVENTS_TABLE])


def lambda_handler(event, context):
    """
    Restaurant events API behind CloudFront path /api/restaurant.

    GET  /api/restaurant - list events, ordered by date
    POST /api/restaurant - create an event

    Lambda Proxy Integration: https://docs.aws.amazon.com/apigateway/latest/developerguide/set-up-lambda-proxy-integrations.html
    """
    print(f"Received event: {json.dumps(event)}")

    try:
        http_method = event['httpMethod']
        path = (event.get('path') or '').rstrip('/')

        if path == EVENTS_PATH:
            if http_method == 'GET':
                return list_events()
            elif http_method == 'POST':
                return create_event(parse_body(event))
            return error_response(405, f"Method {http_method} not allowed")

        return error_response(404, "Route not found")

    except ValueError as e:
        return error_response(400, str(e))
    except Exception as e:
        print(f"Error: {str(e)}")
        return error_response(500, f"Internal error: {str(e)}")


def list_events():
    """
    GET /api/restaurant - List all restaurant events

    DynamoDB Scan: https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/dynamodb/table/scan.html
    """
    response = table.scan()
    items = response.get('Items', [])

    # Scan is paginated at 1 MB
    while 'LastEvaluatedKey' in response:
        response = table.scan(ExclusiveStartKey=response['LastEvaluatedKey'])
        items.extend(response.get('Items', []))

    items.sort(key=lambda item: (item.get('date', ''), item.get('name', '')))
    return success_response({
        'events': items,
        'count': len(items)
    })


def create_event(data):
    """
    POST /api/restaurant - Create a new event

    Required fields: name, date (YYYY-MM-DD). Optional: description, guests.
    """
    item = validate_event(data)
    timestamp = datetime.now(timezone.utc).isoformat()

    item[EVENT_KEY] = str(uuid.uuid4())
    item['created_at'] = timestamp
    item['updated_at'] = timestamp

    table.put_item(Item=item)
    print(f"Created event: {item[EVENT_KEY]}")

    return success_response(item, status_code=201)


def validate_event(data):
    """
    Return the storable fields of an event payload.

    Raises:
        ValueError: on missing or malformed fields
    """
    missing = [field for field in ('name', 'date') if not data.get(field)]
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")

    name = data['name']
    if not isinstance(name, str) or not name.strip():
        raise ValueError("name must be a non-empty string")

    try:
        event_date = date.fromisoformat(str(data['date']))
    except ValueError:
        raise ValueError("date must use the YYYY-MM-DD format")

    item = {
        'name': name.strip(),
        'date': event_date.isoformat(),
    }

    if 'description' in data:
        item['description'] = str(data['description'])

    if 'guests' in data:
        guests = data['guests']
        # bool is an int subclass
        if isinstance(guests, bool) or not isinstance(guests, int) or guests < 1:
            raise ValueError("guests must be a positive integer")
        item['guests'] = guests

    return item
