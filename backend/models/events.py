"""
Lambda trigger event schemas.

Only the fields the functions read are modelled; everything else in the
event is ignored.

Dependencies: pydantic
System role: Event validation for SNS and S3 triggered functions
"""

from pydantic import BaseModel, ConfigDict, Field


class SNSMessageAttribute(BaseModel):
    """SNS message attribute as delivered to Lambda."""

    Type: str = "String"
    Value: str


class SNSPayload(BaseModel):
    """The `Sns` object of an SNS record."""

    model_config = ConfigDict(extra="ignore")

    MessageId: str = ""
    Message: str
    Timestamp: str | None = None
    MessageAttributes: dict[str, SNSMessageAttribute] = Field(default_factory=dict)


class SNSRecord(BaseModel):
    """Single SNS record wrapper."""

    model_config = ConfigDict(extra="ignore")

    Sns: SNSPayload


class SNSEvent(BaseModel):
    """Complete SNS Lambda event."""

    Records: list[SNSRecord] = Field(default_factory=list)


class UsageNotification(BaseModel):
    """Message published when a user's usage data changes."""

    userId: str
    recordCount: int | None = None
    fileName: str | None = None


class S3ObjectRef(BaseModel):
    """Bucket and key of an S3 event record."""

    bucket: str
    key: str
    size: int = 0
