"""
Service-account authorization for the Google Sheets and Drive APIs.
"""

import logging

from google.auth.transport.requests import Request
from google.oauth2 import service_account

from .config import ServiceAccountCredential

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

TOKEN_URI = "https://oauth2.googleapis.com/token"


def authorize(credential: ServiceAccountCredential) -> service_account.Credentials:
    """
    Exchange a service-account identity for a bearer token.

    Performs one token round-trip so that a rejected key fails here rather
    than on the first spreadsheet call. The returned credentials are reused
    for every Sheets request in the run.

    Args:
        credential: Parsed client_email / private_key pair

    Returns:
        Refreshed service-account credentials scoped to Sheets and Drive

    Raises:
        google.auth.exceptions.GoogleAuthError: If the key is rejected or
            the token endpoint cannot be reached
    """
    creds = service_account.Credentials.from_service_account_info(
        {
            "client_email": credential.client_email,
            "private_key": credential.private_key,
            "token_uri": TOKEN_URI,
        },
        scopes=SCOPES,
    )
    logger.debug(f"Requesting access token for {credential.client_email}")
    creds.refresh(Request())
    logger.info(f"Authorized as {credential.client_email}")
    return creds
