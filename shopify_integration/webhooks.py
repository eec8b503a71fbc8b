import hmac
import hashlib
import base64
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .models import Shop

logger = logging.getLogger(__name__)


def verify_webhook(body, hmac_header):
    """True when the base64 HMAC header matches the raw request body."""
    digest = hmac.new(settings.SHOPIFY_API_SECRET.encode("utf-8"), body, hashlib.sha256).digest()
    return hmac.compare_digest(base64.b64encode(digest), hmac_header.encode("utf-8"))


@csrf_exempt
def app_uninstalled(request):
    """
    Handles Shopify 'app/uninstalled' webhook.
    Marks the shop as inactive so its admin sessions stop resolving.
    """
    if request.method != "POST":
        return JsonResponse({"error": "Method not allowed"}, status=405)

    hmac_header = request.headers.get("X-Shopify-Hmac-Sha256")
    if not hmac_header:
        logger.warning("[Webhook] Missing HMAC header")
        return JsonResponse({"error": "Missing HMAC header"}, status=400)

    if not verify_webhook(request.body, hmac_header):
        logger.warning("[Webhook] HMAC verification failed")
        return JsonResponse({"error": "Invalid webhook"}, status=401)

    shop_domain = request.headers.get("X-Shopify-Shop-Domain")
    if not shop_domain:
        return JsonResponse({"error": "Missing shop domain"}, status=400)

    updated = Shop.objects.filter(domain=shop_domain, is_active=True).update(is_active=False)
    if updated:
        logger.info("[Webhook] App uninstalled from %s, marked inactive", shop_domain)
    else:
        logger.info("[Webhook] No active shop record found for %s", shop_domain)

    return JsonResponse({"status": "ok"}, status=200)
