"""
Unit Tests for the Restaurant Event Lambda
Tests request routing, validation and response formatting without AWS

Testing Tools:
- pytest: https://docs.pytest.org/
- unittest.mock: DynamoDB table handle is replaced with a MagicMock
"""

import os
import json
from unittest.mock import patch

os.environ['EVENTS_TABLE_NAME'] = 'test-events-table'
os.environ['AWS_DEFAULT_REGION'] = 'eu-west-1'

from modules.RestaurantEventLambda import lambda_handler, validate_event

import pytest


def make_event(method, body=None, path='/api/restaurant'):
    event = {'httpMethod': method, 'path': path}
    if body is not None:
        event['body'] = body if isinstance(body, str) else json.dumps(body)
    return event


@patch('modules.RestaurantEventLambda.table')
def test_list_events_sorted_by_date(mock_table):
    mock_table.scan.return_value = {
        'Items': [
            {'EventId': '2', 'name': 'Wine tasting', 'date': '2026-12-01'},
            {'EventId': '1', 'name': 'Opening night', 'date': '2026-11-01'},
        ]
    }

    response = lambda_handler(make_event('GET'), {})

    assert response['statusCode'] == 200
    assert response['headers']['Access-Control-Allow-Origin'] == '*'
    body = json.loads(response['body'])
    assert body['count'] == 2
    assert [e['EventId'] for e in body['events']] == ['1', '2']


@patch('modules.RestaurantEventLambda.table')
def test_list_events_follows_pagination(mock_table):
    """Scan results over 1 MB come back in pages"""
    mock_table.scan.side_effect = [
        {'Items': [{'EventId': '1', 'date': '2026-11-01'}], 'LastEvaluatedKey': {'EventId': '1'}},
        {'Items': [{'EventId': '2', 'date': '2026-11-02'}]},
    ]

    response = lambda_handler(make_event('GET'), {})

    body = json.loads(response['body'])
    assert body['count'] == 2
    mock_table.scan.assert_called_with(ExclusiveStartKey={'EventId': '1'})


@patch('modules.RestaurantEventLambda.table')
def test_create_event_success(mock_table):
    """
    Verifies:
    - HTTP 201 Created status code
    - EventId and timestamps are generated
    - The stored item matches the response
    """
    response = lambda_handler(make_event('POST', {
        'name': 'Opening night',
        'date': '2026-11-01',
        'guests': 30
    }), {})

    assert response['statusCode'] == 201
    body = json.loads(response['body'])
    assert body['name'] == 'Opening night'
    assert body['date'] == '2026-11-01'
    assert body['guests'] == 30
    assert 'EventId' in body
    assert 'created_at' in body
    mock_table.put_item.assert_called_once_with(Item=body)


@patch('modules.RestaurantEventLambda.table')
def test_trailing_slash_is_same_route(mock_table):
    mock_table.scan.return_value = {'Items': []}

    response = lambda_handler(make_event('GET', path='/api/restaurant/'), {})

    assert response['statusCode'] == 200


@patch('modules.RestaurantEventLambda.table')
def test_create_event_missing_fields(mock_table):
    response = lambda_handler(make_event('POST', {'name': 'No date'}), {})

    assert response['statusCode'] == 400
    assert 'date' in json.loads(response['body'])['error']
    mock_table.put_item.assert_not_called()


@patch('modules.RestaurantEventLambda.table')
def test_create_event_invalid_json(mock_table):
    response = lambda_handler(make_event('POST', '{not json'), {})

    assert response['statusCode'] == 400
    mock_table.put_item.assert_not_called()


@patch('modules.RestaurantEventLambda.table')
def test_unknown_route(mock_table):
    response = lambda_handler(make_event('GET', path='/api/other'), {})

    assert response['statusCode'] == 404


@patch('modules.RestaurantEventLambda.table')
def test_method_not_allowed(mock_table):
    response = lambda_handler(make_event('DELETE'), {})

    assert response['statusCode'] == 405


@patch('modules.RestaurantEventLambda.table')
def test_dynamodb_failure_returns_500(mock_table):
    mock_table.scan.side_effect = Exception('Service unavailable')

    response = lambda_handler(make_event('GET'), {})

    assert response['statusCode'] == 500
    assert 'Service unavailable' in json.loads(response['body'])['error']


@pytest.mark.parametrize('data, message', [
    ({'name': 'Dinner', 'date': '01-11-2026'}, 'YYYY-MM-DD'),
    ({'name': '   ', 'date': '2026-11-01'}, 'name'),
    ({'name': 'Dinner', 'date': '2026-11-01', 'guests': 0}, 'guests'),
    ({'name': 'Dinner', 'date': '2026-11-01', 'guests': True}, 'guests'),
])
def test_validate_event_rejects(data, message):
    with pytest.raises(ValueError, match=message):
        validate_event(data)
