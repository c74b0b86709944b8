"""
Tripletex Router
Links a user's Tripletex session token after checking that it works
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from driftai.core.security import get_current_user_id
from driftai.db import dynamo
from driftai.models.analysis import TripletexSetup
from driftai.services.tripletex import TripletexClient, TripletexError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/setup")
def setup_tripletex(setup: TripletexSetup, user_id: str = Depends(get_current_user_id)):
    # Test connection before saving
    try:
        TripletexClient(setup.session_token).get_accounts()
    except TripletexError as e:
        logger.warning(f"Tripletex token rejected for user {user_id}: {str(e)}")
        raise HTTPException(status_code=400, detail="Invalid Tripletex token")

    if not dynamo.set_tripletex_token(user_id, setup.session_token):
        raise HTTPException(status_code=500, detail="Failed to save Tripletex token")

    logger.info(f"Tripletex linked for user {user_id}")
    return {"success": True}
