import logging
from decimal import Decimal
from typing import Any, List, Optional
from datetime import datetime

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from driftai.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
users_table = dynamodb.Table(settings.DYNAMO_USERS_TABLE)
analyses_table = dynamodb.Table(settings.DYNAMO_ANALYSES_TABLE)


def get_user_by_email(email: str):
    """Query the Users table by email (assumes a GSI exists on email)."""
    try:
        response = users_table.query(
            IndexName="email-index",
            KeyConditionExpression=Key("email").eq(email)
        )
        return _from_dynamo(response["Items"][0]) if response["Items"] else None
    except (ClientError, BotoCoreError) as e:
        logger.error(f"get_user_by_email failed: {_error_message(e)}")
        return None


def get_user_by_id(user_id: str):
    """Get user by user_id from the Users table."""
    try:
        response = users_table.get_item(Key={"user_id": user_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except (ClientError, BotoCoreError) as e:
        logger.error(f"get_user_by_id failed: {_error_message(e)}")
        return None


class EmailTakenError(Exception):
    """Raised when another account already holds the email address."""


def _email_claim_key(email: str) -> dict:
    return {"user_id": f"EMAIL#{email.lower()}"}


def put_user(user_item: dict):
    """
    Insert a new user into the Users table. Never overwrites an existing user_id.

    The email is claimed first with a conditional write on an 'EMAIL#<email>'
    item (no 'email' attribute, so it stays out of email-index); a second
    registration with the same email raises EmailTakenError.
    """
    claim = dict(_email_claim_key(user_item["email"]), owner_id=user_item["user_id"])
    try:
        users_table.put_item(Item=claim, ConditionExpression="attribute_not_exists(user_id)")
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
            raise EmailTakenError(user_item["email"]) from e
        logger.error(f"put_user email claim failed: {_error_message(e)}")
        return False
    except BotoCoreError as e:
        logger.error(f"put_user email claim failed: {_error_message(e)}")
        return False

    try:
        users_table.put_item(
            Item=_convert_for_dynamo(user_item),
            ConditionExpression="attribute_not_exists(user_id)",
        )
        return True
    except (ClientError, BotoCoreError) as e:
        logger.error(f"put_user failed: {_error_message(e)}")
        _release_email_claim(user_item["email"])
        return False


def _release_email_claim(email: str):
    try:
        users_table.delete_item(Key=_email_claim_key(email))
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Releasing email claim failed: {_error_message(e)}")


def set_tripletex_token(user_id: str, session_token: str):
    """Store the Tripletex session token on an existing user."""
    try:
        users_table.update_item(
            Key={"user_id": user_id},
            UpdateExpression="SET #t = :t, #u = :u",
            ConditionExpression="attribute_exists(user_id)",
            ExpressionAttributeNames={"#t": "tripletex_token", "#u": "updated_at"},
            ExpressionAttributeValues={":t": session_token, ":u": datetime.utcnow().isoformat()},
        )
        return True
    except (ClientError, BotoCoreError) as e:
        logger.error(f"set_tripletex_token failed: {_error_message(e)}")
        return False


def get_tripletex_token(user_id: str) -> Optional[str]:
    user = get_user_by_id(user_id)
    if not user:
        return None
    return user.get("tripletex_token") or None


def put_analysis(user_id: str, kind: str, data: List[dict], insight: Optional[str] = None):
    """
    Store a computed analysis. The sort key is '<kind>#<iso timestamp>' so one
    user's results can be listed per kind in time order.
    Returns the stored item, or None on failure.
    """
    created_at = datetime.utcnow().isoformat()
    item = {
        "user_id": user_id,
        "analysis_id": f"{kind}#{created_at}",
        "kind": kind,
        "data": data,
        "insight": insight,
        "created_at": created_at,
    }
    try:
        analyses_table.put_item(Item=_convert_for_dynamo(item))
        return item
    except (ClientError, BotoCoreError) as e:
        logger.error(f"put_analysis failed: {_error_message(e)}")
        return None


def list_analyses(user_id: str, kind: str, limit: int = 10):
    """Newest-first list of stored analyses of one kind for a user."""
    try:
        response = analyses_table.query(
            KeyConditionExpression=Key("user_id").eq(user_id) &
                                   Key("analysis_id").begins_with(f"{kind}#"),
            ScanIndexForward=False,
            Limit=limit,
        )
        return [_from_dynamo(item) for item in response["Items"]]
    except (ClientError, BotoCoreError) as e:
        logger.error(f"list_analyses failed: {_error_message(e)}")
        return []


def _error_message(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Message", str(error))
    return str(error)


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
