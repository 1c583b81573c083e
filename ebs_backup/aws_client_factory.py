"""
AWS Client Factory Module
Provides boto3 EC2 client creation for the snapshot lifecycle tool.
"""

from __future__ import annotations

import logging
import os

import boto3
from dotenv import load_dotenv

from .exceptions import CredentialLoadError


def _resolve_env_path(env_path: str | None = None) -> str | None:
    """
    Determine which .env file, if any, should be used for AWS credentials.

    Priority order:
      1. Explicit parameter
      2. AWS_ENV_FILE environment variable
      3. None (boto3 default credential chain)
    """
    if env_path:
        return env_path
    return os.environ.get("AWS_ENV_FILE") or None


def load_credentials_from_env(env_path: str) -> tuple[str, str, str | None]:
    """
    Load AWS credentials from a .env file.

    Args:
        env_path: Path of the .env file

    Returns:
        tuple: (aws_access_key_id, aws_secret_access_key, aws_session_token)

    Raises:
        CredentialLoadError: If the key pair is not found after loading the file
    """
    load_dotenv(env_path)

    aws_access_key_id = os.getenv("AWS_ACCESS_KEY_ID")
    aws_secret_access_key = os.getenv("AWS_SECRET_ACCESS_KEY")
    aws_session_token = os.getenv("AWS_SESSION_TOKEN")
    if aws_access_key_id and aws_secret_access_key:
        logging.info("AWS credentials loaded from %s", env_path)
        if aws_session_token:
            logging.info("AWS session token loaded from %s", env_path)
        return aws_access_key_id, aws_secret_access_key, aws_session_token

    raise CredentialLoadError(
        f"AWS credentials not found in {env_path}. "
        "Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY."
    )


def create_ec2_client(region: str, env_path: str | None = None):
    """
    Create an EC2 boto3 client for the given region.

    When a .env file is configured its credentials are passed explicitly;
    otherwise boto3 resolves credentials through its default chain
    (environment, shared config/profiles, instance role).

    Args:
        region: AWS region name
        env_path: Optional .env file override

    Returns:
        boto3.client: Configured EC2 client
    """
    client_kwargs = {"region_name": region}

    resolved_path = _resolve_env_path(env_path)
    if resolved_path is not None:
        access_key, secret_key, session_token = load_credentials_from_env(resolved_path)
        client_kwargs["aws_access_key_id"] = access_key
        client_kwargs["aws_secret_access_key"] = secret_key
        if session_token:
            client_kwargs["aws_session_token"] = session_token

    return boto3.client("ec2", **client_kwargs)
