"""
Admin session authentication for the embedded app.

Shopify reaches the app two ways: the initial iframe load carries a signed
query string (``shop``, ``timestamp``, ``hmac`` ...), and every fetch made
from inside the page by App Bridge carries a session token in the
``Authorization`` header. Either one resolves to an ``AdminContext`` that
the sections workflow receives explicitly.
"""
import hashlib
import hmac
import logging
import re
import time
from dataclasses import dataclass
from functools import wraps
from urllib.parse import urlencode, urlparse

import jwt
from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import redirect
from django.urls import reverse

from .models import Shop
from .shopify_api import AdminGraphQLClient

logger = logging.getLogger(__name__)

SHOP_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9\-]*\.myshopify\.com$")

# seconds a signed admin URL stays usable
SIGNED_QUERY_MAX_AGE = 300


class AdminAuthError(Exception):
    """Authentication error with HTTP status code."""

    def __init__(self, message, status_code=401):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ShopNotInstalled(AdminAuthError):
    def __init__(self, shop):
        self.shop = shop
        super().__init__(f"Shop {shop} has not installed the app", status_code=401)


@dataclass
class AdminContext:
    """Authenticated admin session for one shop."""

    shop: str
    access_token: str
    client: AdminGraphQLClient

    @classmethod
    def for_shop(cls, shop_obj):
        return cls(
            shop=shop_obj.domain,
            access_token=shop_obj.offline_token,
            client=AdminGraphQLClient(shop_obj.domain, shop_obj.offline_token),
        )


def is_valid_shop_domain(shop):
    return bool(shop) and bool(SHOP_DOMAIN_RE.match(shop))


def verify_query_hmac(params, secret=None):
    """
    Verify the ``hmac`` Shopify appends to app URLs and OAuth redirects.
    """
    secret = secret or settings.SHOPIFY_API_SECRET
    hmac_param = params.get("hmac")
    if not hmac_param:
        return False

    sorted_params = {k: v for k, v in params.items() if k not in ("hmac", "signature")}
    message = "&".join([f"{k}={v}" for k, v in sorted(sorted_params.items())])
    computed_hmac = hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(computed_hmac.encode("utf-8"), hmac_param.encode("utf-8"))


def is_fresh_timestamp(timestamp, max_age=SIGNED_QUERY_MAX_AGE):
    try:
        issued = int(timestamp)
    except (TypeError, ValueError):
        return False
    return abs(time.time() - issued) <= max_age


def decode_session_token(token):
    """
    Validate an App Bridge session token and return its claims.
    Raises AdminAuthError when the signature, audience or lifetime is off.
    """
    try:
        claims = jwt.decode(
            token,
            settings.SHOPIFY_API_SECRET,
            algorithms=["HS256"],
            audience=settings.SHOPIFY_API_KEY,
            leeway=10,
            options={"require": ["exp", "dest", "aud"]},
        )
    except jwt.InvalidTokenError as e:
        raise AdminAuthError(f"Invalid session token: {e}") from e

    shop = urlparse(claims["dest"]).netloc
    if not is_valid_shop_domain(shop):
        raise AdminAuthError("Session token has an invalid destination")
    claims["shop"] = shop
    return claims


def _bearer_token(request):
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return None


def authenticate_admin(request):
    """
    Resolve the request to an AdminContext, or raise AdminAuthError.
    """
    token = _bearer_token(request)
    if token:
        shop = decode_session_token(token)["shop"]
    else:
        shop = request.GET.get("shop")
        if not shop:
            raise AdminAuthError("Missing shop parameter", status_code=400)
        if not is_valid_shop_domain(shop):
            raise AdminAuthError("Invalid shop parameter", status_code=400)
        if not verify_query_hmac(request.GET.dict()):
            raise AdminAuthError("HMAC verification failed")
        if not is_fresh_timestamp(request.GET.get("timestamp")):
            raise AdminAuthError("Signed request has expired")

    shop_obj = Shop.objects.filter(domain=shop, is_active=True).first()
    if not shop_obj:
        raise ShopNotInstalled(shop)

    logger.debug("[Auth] Authenticated admin session for %s", shop)
    return AdminContext.for_shop(shop_obj)


def admin_required(view_func):
    """
    Attach ``request.shopify_admin`` before calling the view.
    A page load from a shop that hasn't installed the app yet is sent
    through OAuth; everything else gets a JSON error.
    """
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        try:
            request.shopify_admin = authenticate_admin(request)
        except ShopNotInstalled as e:
            if request.method == "GET":
                logger.info("[Auth] %s not installed, starting OAuth", e.shop)
                return redirect(reverse("shopify_oauth_start") + "?" + urlencode({"shop": e.shop}))
            return JsonResponse({"error": e.message}, status=e.status_code)
        except AdminAuthError as e:
            logger.warning("[Auth] Rejected %s %s: %s", request.method, request.path, e.message)
            return JsonResponse({"error": e.message}, status=e.status_code)
        return view_func(request, *args, **kwargs)

    return _wrapped
