import hashlib
import hmac
import time
from types import SimpleNamespace

import jwt
import pytest
from django.conf import settings

from shopify_integration.auth import AdminContext
from shopify_integration.models import Shop

from .fakes import SHOP_DOMAIN, FakeGraphQLClient, FakeResponse


@pytest.fixture
def make_admin():
    def _make(*responses):
        return AdminContext(
            shop=SHOP_DOMAIN,
            access_token="shpat_test",
            client=FakeGraphQLClient(*responses),
        )
    return _make


@pytest.fixture
def shop(db):
    return Shop.objects.create(domain=SHOP_DOMAIN, offline_token="shpat_test")


@pytest.fixture
def session_token():
    def _token(shop=SHOP_DOMAIN, **overrides):
        now = int(time.time())
        claims = {
            "iss": f"https://{shop}/admin",
            "dest": f"https://{shop}",
            "aud": settings.SHOPIFY_API_KEY,
            "sub": "42",
            "exp": now + 60,
            "nbf": now - 5,
            "iat": now - 5,
        }
        claims.update(overrides)
        return jwt.encode(claims, settings.SHOPIFY_API_SECRET, algorithm="HS256")
    return _token


@pytest.fixture
def signed_query():
    def _sign(**params):
        message = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
        digest = hmac.new(
            settings.SHOPIFY_API_SECRET.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return {**params, "hmac": digest}
    return _sign


@pytest.fixture
def shopify_post(monkeypatch):
    """
    Replace requests.post (Admin client and token exchange) with a queue of canned
    responses; recorded calls are available on the returned object.
    """
    fake = SimpleNamespace(responses=[], calls=[])

    def _post(url, headers=None, json=None, data=None, timeout=None):
        fake.calls.append({"url": url, "headers": headers, "json": json, "data": data, "timeout": timeout})
        response = fake.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response if isinstance(response, FakeResponse) else FakeResponse(response)

    monkeypatch.setattr("shopify_integration.shopify_api.requests.post", _post)
    return fake
