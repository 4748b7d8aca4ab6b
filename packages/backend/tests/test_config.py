"""Settings validation tests."""

import pytest
from pydantic import ValidationError

from labhub.config import DEFAULT_JWT_SECRET, Settings


def test_default_secret_refused_outside_development():
    with pytest.raises(ValidationError, match="LABHUB_JWT_SECRET"):
        Settings(environment="production", jwt_secret=DEFAULT_JWT_SECRET)


def test_custom_secret_accepted_in_production():
    s = Settings(environment="production", jwt_secret="a-real-secret-value")
    assert s.token_expire_minutes is None


def test_unknown_storage_backend_refused():
    with pytest.raises(ValidationError):
        Settings(storage_backend="ftp")
