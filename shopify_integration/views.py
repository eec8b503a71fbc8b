from django.shortcuts import render, redirect
from django.http import JsonResponse
from django.conf import settings
from django.urls import reverse
import logging
import urllib.parse
import secrets
import requests

from .auth import is_valid_shop_domain, verify_query_hmac
from .models import Shop
from .shopify_api import AdminGraphQLClient, ShopifyAPIError, register_uninstall_webhook

logger = logging.getLogger(__name__)


def start_oauth(request):
    """
    Starts the Shopify OAuth installation flow.
    Redirects merchant to Shopify to approve the app.
    """
    shop = request.GET.get('shop')  # example: example.myshopify.com
    if not shop:
        return render(request, "error.html", {"message": "Missing shop parameter"}, status=400)
    if not is_valid_shop_domain(shop):
        return render(request, "error.html", {"message": "Invalid shop parameter"}, status=400)

    state = secrets.token_hex(16)
    request.session['oauth_state'] = state

    params = {
        "client_id": settings.SHOPIFY_API_KEY,
        "scope": settings.SHOPIFY_SCOPES,
        "redirect_uri": settings.BASE_URL + reverse("shopify_oauth_callback"),
        "state": state,
    }

    auth_url = f"https://{shop}/admin/oauth/authorize?" + urllib.parse.urlencode(params)
    logger.debug("[OAuth] Redirecting %s to %s", shop, auth_url)
    return redirect(auth_url)


def oauth_callback(request):
    """
    Handles Shopify OAuth callback.
    Saves or reactivates the shop, registers the uninstall webhook and
    sends the merchant on to the app page.
    """
    query_params = request.GET
    shop = query_params.get("shop")
    code = query_params.get("code")
    state = query_params.get("state")

    if not shop or not code:
        return JsonResponse({"error": "Missing shop or code"}, status=400)

    if not state or state != request.session.get("oauth_state"):
        return JsonResponse({"error": "Invalid state parameter"}, status=400)

    if not is_valid_shop_domain(shop) or not verify_query_hmac(query_params.dict()):
        return JsonResponse({"error": "HMAC verification failed"}, status=400)

    # Exchange code for access token
    token_url = f"https://{shop}/admin/oauth/access_token"
    response = requests.post(token_url, data={
        "client_id": settings.SHOPIFY_API_KEY,
        "client_secret": settings.SHOPIFY_API_SECRET,
        "code": code
    }, timeout=settings.SHOPIFY_REQUEST_TIMEOUT)
    access_token = response.json().get("access_token") if response.ok else None

    if not access_token:
        logger.error("[OAuth] Token exchange failed for %s: %s", shop, response.text)
        return JsonResponse({"error": "Failed to get access token"}, status=400)

    request.session.pop("oauth_state", None)

    # Save or reactivate the shop
    shop_obj, created = Shop.objects.update_or_create(
        domain=shop,
        defaults={"offline_token": access_token, "is_active": True}
    )
    logger.info("[OAuth] Shop saved/reactivated: %s, created=%s", shop_obj, created)

    # Register uninstall webhook automatically
    try:
        register_uninstall_webhook(
            AdminGraphQLClient(shop, access_token),
            settings.BASE_URL + reverse("shopify_app_uninstalled"),
        )
    except (ShopifyAPIError, requests.RequestException) as e:
        logger.warning("[OAuth] Failed to register uninstall webhook for %s: %s", shop, e)

    # Back into the admin, which reloads the app embedded with a signed query
    return redirect(f"https://{shop}/admin/apps/{settings.SHOPIFY_API_KEY}")
