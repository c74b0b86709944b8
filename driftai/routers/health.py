"""
Health Check Router
Liveness endpoint plus a reachability check of the DynamoDB tables
"""
from fastapi import APIRouter
from datetime import datetime
import logging
from botocore.exceptions import ClientError

from driftai.core.config import settings
from driftai.db import dynamo

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    return {
        "status": "OK",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


def _table_status(name: str, table) -> dict:
    try:
        table.scan(Limit=1)
        return {"name": name, "status": "accessible", "region": settings.DYNAMO_REGION}
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        logger.error(f"DynamoDB check failed for {name}: {str(e)}")
        return {"name": name, "status": "error", "error": f"{error_code}: {str(e)}"}
    except Exception as e:
        logger.error(f"DynamoDB check failed for {name}: {str(e)}")
        return {"name": name, "status": "error", "error": str(e)}


@router.get("/status")
def service_status():
    """
    Check connectivity of the DynamoDB tables:
    - Users
    - Analyses
    """
    tables = {
        "users": _table_status(settings.DYNAMO_USERS_TABLE, dynamo.users_table),
        "analyses": _table_status(settings.DYNAMO_ANALYSES_TABLE, dynamo.analyses_table),
    }
    connected = all(table["status"] == "accessible" for table in tables.values())

    return {
        "timestamp": datetime.utcnow().isoformat(),
        "services": {"dynamodb": {"connected": connected, "tables": tables}},
        "overall_status": "healthy" if connected else "degraded",
    }
