import json
import os

from divtrack.infrastructure.secrets.secrets_manager_adapter import SecretsManagerAdapter


class FakeSecretsClient:
    def __init__(self, secrets):
        self.secrets = secrets
        self.requested = []

    def get_secret_value(self, SecretId):
        self.requested.append(SecretId)
        return {"SecretString": json.dumps(self.secrets)}


def test_get_secret_deserializes_json():
    client = FakeSecretsClient({"FMP_API_KEY": "abc"})
    adapter = SecretsManagerAdapter(client=client)
    assert adapter.get_secret("arn:aws:secretsmanager:x") == {"FMP_API_KEY": "abc"}
    assert client.requested == ["arn:aws:secretsmanager:x"]


def test_load_into_env_keeps_explicit_values(monkeypatch):
    monkeypatch.setattr(os, "environ", {"FMP_API_KEY": "from-env"})
    client = FakeSecretsClient({"FMP_API_KEY": "from-secret", "SUPABASE_JWT_SECRET": "jwt"})

    SecretsManagerAdapter(client=client).load_into_env("arn")

    assert os.environ["FMP_API_KEY"] == "from-env"
    assert os.environ["SUPABASE_JWT_SECRET"] == "jwt"
