import time


SHOP_DOMAIN = "test-shop.myshopify.com"


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeGraphQLClient:
    """Stands in for AdminGraphQLClient; replays queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def graphql(self, query, variables=None):
        self.calls.append({"query": query, "variables": variables})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, FakeResponse):
            return response
        return FakeResponse(response)


def themes_payload(*nodes):
    return {"data": {"themes": {"edges": [{"node": node} for node in nodes]}}}


def theme_file_create_payload(*user_errors):
    return {"data": {"themeFileCreate": {"userErrors": list(user_errors)}}}


def now_timestamp(offset=0):
    return str(int(time.time()) + offset)
