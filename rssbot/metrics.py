"""CloudWatch run metrics for RSS Telegram relay."""

import boto3

from .logging_config import create_execution_logger
from .models import PublishResult


def send_cloudwatch_metrics(
    result: PublishResult,
    success: bool,
    namespace: str,
    aws_region: str,
    execution_id: str,
) -> None:
    """
    Send run metrics to CloudWatch.

    Failures are logged and never propagated: metrics must not fail a run.

    Args:
        result: Outcome of the run (partial if it failed)
        success: Whether the run completed without error
        namespace: CloudWatch namespace
        aws_region: AWS region for CloudWatch client
        execution_id: Execution ID for logging context
    """
    metrics_logger = create_execution_logger("cloudwatch_metrics", execution_id)
    status = [{"Name": "Status", "Value": "Success" if success else "Failure"}]

    metric_data = [
        {"MetricName": "ItemsFound", "Value": result.found, "Unit": "Count"},
        {"MetricName": "ItemsPending", "Value": result.pending, "Unit": "Count"},
        {"MetricName": "MessagesSent", "Value": result.sent, "Unit": "Count"},
        {"MetricName": "ItemsRemaining", "Value": result.remaining, "Unit": "Count"},
        {
            "MetricName": "ExecutionSuccess",
            "Value": 1 if success else 0,
            "Unit": "Count",
            "Dimensions": status,
        },
        {
            "MetricName": "ExecutionFailure",
            "Value": 0 if success else 1,
            "Unit": "Count",
            "Dimensions": status,
        },
    ]

    try:
        metrics_logger.info("Sending metrics to CloudWatch", metrics=result.as_dict())
        cloudwatch = boto3.client("cloudwatch", region_name=aws_region)
        cloudwatch.put_metric_data(Namespace=namespace, MetricData=metric_data)
        metrics_logger.info(
            "Successfully sent metrics to CloudWatch",
            metrics_sent=len(metric_data),
            namespace=namespace,
        )
    except Exception as e:
        metrics_logger.error(f"Failed to send CloudWatch metrics: {e}", error=str(e))
