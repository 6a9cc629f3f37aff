"""
Boundary layer for external system integrations.

Wraps the AWS services the functions talk to (DynamoDB, S3, Cognito,
SES, SNS, SageMaker, SSM and the API Gateway management API).
"""
