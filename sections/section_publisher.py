"""
Builds the "Simple Template" section and writes it into a theme.

The Liquid body is fixed; only the leading comment carries the generated
file key. The key is timestamp-based, so every publish creates a new file.
"""
import json
import logging
import re
import textwrap
import time

from shopify_integration.shopify_api import ShopifyAPIError

from .results import Failure, SectionFile, Success, UserError

logger = logging.getLogger(__name__)

SECTION_DISPLAY_NAME = "Simple Template"

SUCCESS_MESSAGE = "Section added successfully!"
FAILURE_MESSAGE = "Failed to create section"

THEME_FILE_CREATE_MUTATION = """
mutation addSectionToTheme($input: ThemeFileInput!) {
  themeFileCreate(input: $input) {
    userErrors {
      field
      message
    }
  }
}
"""

SECTION_MARKUP = """\
  <div class="simple-template">
    <h2>Simple Template Section</h2>
    <p>This is a simple template added to your theme!</p>
    <style>
      .simple-template {
        padding: 20px;
        background-color: #f9f9f9;
        border: 1px solid #ddd;
        border-radius: 5px;
      }
      .simple-template h2 {
        color: #333;
      }
      .simple-template p {
        color: #666;
      }
    </style>
  </div>
"""

SECTION_SCHEMA = {
    "name": SECTION_DISPLAY_NAME,
    "settings": [],
    "presets": [
        {
            "name": SECTION_DISPLAY_NAME,
            "category": "Custom",
        }
    ],
}

_WHITESPACE_RE = re.compile(r"\s+")


def section_name(timestamp_ms):
    return f"{SECTION_DISPLAY_NAME} {timestamp_ms}"


def slugify_section_name(name):
    """Lower-case and collapse every whitespace run into one hyphen."""
    return _WHITESPACE_RE.sub("-", name.lower())


def section_key(name):
    return f"sections/{slugify_section_name(name)}.liquid"


def build_liquid_document(name):
    schema = textwrap.indent(json.dumps(SECTION_SCHEMA, indent=2), "  ")
    return (
        f"\n  <!-- {section_key(name)} -->\n"
        f"{SECTION_MARKUP}\n"
        "  {% schema %}\n"
        f"{schema}\n"
        "  {% endschema %}\n"
    )


def build_section_file(theme_id, now_ms=None):
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    name = section_name(now_ms)
    return SectionFile(key=section_key(name), value=build_liquid_document(name), theme_id=theme_id)


def publish_section(admin, theme_id, now_ms=None):
    """
    Create the section file on ``theme_id`` in a single attempt.

    Returns Success, or Failure carrying the mutation's userErrors in the
    order Shopify sent them. Transport errors are not caught here.
    """
    section_file = build_section_file(theme_id, now_ms)

    response = admin.client.graphql(
        THEME_FILE_CREATE_MUTATION,
        {"input": section_file.as_input()},
    )
    response_json = response.json()

    payload = (response_json.get("data") or {}).get("themeFileCreate")
    if payload is None:
        raise ShopifyAPIError(
            f"themeFileCreate returned no payload: {response_json.get('errors')}",
            errors=response_json.get("errors"),
        )

    user_errors = payload.get("userErrors") or []
    if user_errors:
        logger.error("[Section] GraphQL errors creating %s on %s: %s", section_file.key, admin.shop, user_errors)
        return Failure(
            error=FAILURE_MESSAGE,
            details=[UserError.from_payload(error) for error in user_errors],
        )

    logger.info("[Section] Created %s on theme %s for %s", section_file.key, theme_id, admin.shop)
    return Success(message=SUCCESS_MESSAGE)
