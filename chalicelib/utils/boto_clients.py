import os
import boto3

from botocore.config import Config

main_boto_region = os.environ.get('MAIN_BOTO_REGION', 'eu-central-1')
aws_config_ddb = Config(retries={'max_attempts': 30}, region_name=os.environ.get('AWS_REGION', 'eu-central-1'))


def get_s3_client():
    # S3 Client.
    # Clients provide a low-level interface to AWS services whose methods map close to 1:1 with service APIs.
    return boto3.client('s3', region_name=main_boto_region)
