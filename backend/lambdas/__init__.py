"""Lambda function entry points, one module per deployed function."""
