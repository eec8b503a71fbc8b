from django.utils.deprecation import MiddlewareMixin

from .auth import is_valid_shop_domain


class EmbeddedAppMiddleware(MiddlewareMixin):
    def process_response(self, request, response):
        """
        Add headers to allow Shopify embedded app in iframe.
        """
        if not request.path.startswith("/shopify/webhooks/"):
            shop = request.GET.get("shop")
            shop_origin = f"https://{shop}" if is_valid_shop_domain(shop) else "https://*.myshopify.com"

            # Content-Security-Policy focused on Shopify Admin
            response["Content-Security-Policy"] = (
                f"frame-ancestors {shop_origin} https://admin.shopify.com;"
            )
        return response
