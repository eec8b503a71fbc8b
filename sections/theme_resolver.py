import logging
from typing import Iterable, Optional

from django.conf import settings

from .results import Theme

logger = logging.getLogger(__name__)

# Only the first page is read. A store whose live theme sits past the
# tenth entry resolves to no theme at all.
THEMES_PAGE_SIZE = 10

THEMES_QUERY = """
query {
  themes(first: %d) {
    edges {
      node {
        id
        name
        role
      }
    }
  }
}
""" % THEMES_PAGE_SIZE


def select_main_theme(payload: dict, role: str = "main") -> Optional[Theme]:
    """
    Pick the first theme, in the order Shopify returned them, whose role
    is exactly ``role``. Returns None when the envelope carries no themes.
    """
    themes = ((payload or {}).get("data") or {}).get("themes")
    if not themes:
        logger.warning("[Themes] No themes data found in the response.")
        return None

    edges: Iterable[dict] = (themes.get("edges") or [])[:THEMES_PAGE_SIZE]
    for edge in edges:
        node = edge["node"]
        if node.get("role") == role:
            return Theme(id=node["id"], name=node.get("name", ""), role=node["role"])

    logger.warning("[Themes] No active theme found.")
    return None


def resolve_main_theme(admin) -> Optional[Theme]:
    """
    Fetch the store's themes and return the active one, or None.

    Never raises: transport failures and malformed responses are logged
    and reported as "no theme".
    """
    try:
        response = admin.client.graphql(THEMES_QUERY)
        data = response.json()

        logger.debug("[Themes] Themes query response for %s: %s", admin.shop, data)

        return select_main_theme(data, settings.SHOPIFY_MAIN_THEME_ROLE)
    except Exception:
        logger.exception("[Themes] Error fetching current theme for %s", admin.shop)
        return None
