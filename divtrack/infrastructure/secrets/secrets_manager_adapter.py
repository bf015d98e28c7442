"""
Infrastructure adapter: AWS Secrets Manager → ISecretStore.

load_into_env() is called once at startup, before Settings.from_env() reads
the environment, so FMP_API_KEY and SUPABASE_JWT_SECRET can live in a single
JSON secret instead of the container environment.
"""

import json
import os
from typing import Any, Optional

import boto3

from divtrack.domain.ports.secret_store_port import ISecretStore


class SecretsManagerAdapter(ISecretStore):
    """Fetches and deserializes secrets from AWS Secrets Manager."""

    def __init__(self, region: str | None = None, client: Optional[Any] = None) -> None:
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
        )

    def get_secret(self, secret_id: str) -> dict:
        """Fetch and deserialize a JSON secret by ARN."""
        response = self._client.get_secret_value(SecretId=secret_id)
        return json.loads(response["SecretString"])

    def load_into_env(self, secret_id: str) -> None:
        """Inject all key-value pairs of a JSON secret into os.environ.

        Values already present in the environment are left alone.
        """
        secrets = self.get_secret(secret_id)
        for key, value in secrets.items():
            os.environ.setdefault(key, str(value))


def bootstrap_secrets(environ_key: str = "DIVTRACK_SECRET_ARN") -> bool:
    """Seed os.environ from the secret named by *environ_key*, if it is set.

    Must run before Settings.from_env(). Returns True if a secret was loaded.
    """
    secret_arn = os.environ.get(environ_key)
    if not secret_arn:
        return False
    SecretsManagerAdapter().load_into_env(secret_arn)
    return True
