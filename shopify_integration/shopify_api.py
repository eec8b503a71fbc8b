import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


WEBHOOK_SUBSCRIPTION_CREATE = """
mutation webhookSubscriptionCreate($topic: WebhookSubscriptionTopic!, $webhookSubscription: WebhookSubscriptionInput!) {
  webhookSubscriptionCreate(topic: $topic, webhookSubscription: $webhookSubscription) {
    webhookSubscription {
      id
    }
    userErrors {
      field
      message
    }
  }
}
"""


class ShopifyAPIError(Exception):
    """Raised when an Admin API request fails"""

    def __init__(self, message, status_code=None, errors=None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class AdminGraphQLClient:
    """
    Thin Admin GraphQL client bound to one shop and its offline token.
    """

    def __init__(self, shop, access_token, api_version=None, timeout=None):
        self.shop = shop
        self.access_token = access_token
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout if timeout is not None else settings.SHOPIFY_REQUEST_TIMEOUT
        self.url = f"https://{shop}/admin/api/{self.api_version}/graphql.json"
        self.headers = {
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def graphql(self, query, variables=None):
        """
        POST a query or mutation and hand back the raw response; its
        ``.json()`` is the ``{data, errors}`` envelope.
        """
        payload = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        response = requests.post(self.url, headers=self.headers, json=payload, timeout=self.timeout)
        if not response.ok:
            logger.error("[GraphQL] %s returned %s: %s", self.shop, response.status_code, response.text)
            raise ShopifyAPIError(
                f"Shopify API error: {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def execute(self, query, variables=None):
        data = self.graphql(query, variables).json()
        if data.get("errors") and not data.get("data"):
            raise ShopifyAPIError(f"Shopify API error: {data['errors']}", errors=data["errors"])
        return data


def register_uninstall_webhook(client, callback_url):
    """
    Subscribe the app to ``app/uninstalled`` for the client's shop.
    Returns the mutation's userErrors (empty on success).
    """
    variables = {
        "topic": "APP_UNINSTALLED",
        "webhookSubscription": {
            "callbackUrl": callback_url,
            "format": "JSON",
        },
    }
    data = client.execute(WEBHOOK_SUBSCRIPTION_CREATE, variables)
    result = (data.get("data") or {}).get("webhookSubscriptionCreate") or {}
    user_errors = result.get("userErrors") or []
    if user_errors:
        logger.warning("[Webhook] Uninstall webhook errors for %s: %s", client.shop, user_errors)
    else:
        logger.info("[Webhook] Uninstall webhook registered for %s", client.shop)
    return user_errors
