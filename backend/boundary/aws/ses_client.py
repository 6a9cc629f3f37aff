"""
SES client.

Registers user emails as verified identities (SES sandbox accounts can
only deliver to those) and sends usage alert emails.

Dependencies: boto3, botocore
System role: Email delivery
"""

import logging

import boto3
from botocore.exceptions import ClientError

from backend.core.exceptions import EnergyMonitorException

logger = logging.getLogger(__name__)


class SESEmailClient:
    """SES operations."""

    def __init__(self, region: str = "us-east-1", client=None) -> None:
        """
        Initialize SES client.

        Args:
            region: AWS region
            client: Preconfigured boto3 SES client
        """
        self._client = client or boto3.client("ses", region_name=region)

    def register_email(self, email: str) -> None:
        """
        Start verification of an email identity unless it already exists.

        An identity that exists but is not yet verified is left pending;
        no second verification email is sent.

        Args:
            email: Address to register

        Raises:
            EnergyMonitorException: SES rejected the registration
        """
        try:
            if self._identity_exists(email):
                status = self._verification_status(email)
                if status == "Success":
                    logger.info("Email already verified", extra={"email": email})
                    return
                logger.info(
                    "Email exists but is not verified",
                    extra={"email": email, "verification_status": status},
                )
                return

            logger.info("Creating new email identity", extra={"email": email})
            self._client.verify_email_identity(EmailAddress=email)
            logger.info("Verification email sent", extra={"email": email})
        except ClientError as e:
            logger.error("Error registering email with SES", extra={"error": str(e)})
            raise EnergyMonitorException("Failed to register email for notifications") from e

    def _identity_exists(self, email: str) -> bool:
        try:
            response = self._client.list_identities(IdentityType="EmailAddress", MaxItems=1000)
        except ClientError as e:
            logger.error("Error checking identity existence", extra={"error": str(e)})
            return False
        return email in response.get("Identities", [])

    def _verification_status(self, email: str) -> str:
        try:
            response = self._client.get_identity_verification_attributes(Identities=[email])
        except ClientError as e:
            logger.error("Error checking verification status", extra={"error": str(e)})
            return "NotFound"
        attributes = response.get("VerificationAttributes", {}).get(email, {})
        return attributes.get("VerificationStatus", "NotFound")

    def send_text_email(self, source: str, to: str, subject: str, body: str) -> None:
        """
        Send a plain text email.

        Raises:
            ClientError: SES rejected the message
        """
        self._client.send_email(
            Source=source,
            Destination={"ToAddresses": [to]},
            Message={
                "Subject": {"Data": subject},
                "Body": {"Text": {"Data": body}},
            },
        )
