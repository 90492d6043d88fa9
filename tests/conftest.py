import asyncio
import copy
import json

import pytest

import consume

BOOKS = [
    {"id": 1, "title": "The Great Gatsby", "authorId": 1},
    {"id": 2, "title": "Nineteen Eighty-Four", "authorId": 2},
]


def json_response(status_code, data):
    return consume.Response(
        status_code,
        json.dumps(data).encode(),
        headers={"Content-Type": "application/json"},
    )


class FakeApi:
    """an in-memory JSON API, called like ``fetch``"""

    def __init__(self, url):
        self.url = url
        self.db = {
            "books": {book["id"]: book for book in copy.deepcopy(BOOKS)}
        }
        self.calls = []

    async def __call__(self, url, options):
        await asyncio.sleep(0)
        self.calls.append((url, options))
        method = options["method"]
        body = json.loads(options["body"]) if "body" in options else None
        path = url[len(self.url):].strip("/").split("/")

        if path == ["thisEndpointErrors", "1"]:
            return consume.Response(400, b"")

        name, *rest = path
        if name not in self.db:
            return consume.Response(404, b"{}")
        table = self.db[name]

        if not rest:
            if method == "GET":
                return json_response(200, list(table.values()))
            elif method == "POST":
                item = dict(body, id=max(table, default=0) + 1)
                table[item["id"]] = item
                return json_response(201, item)
            return consume.Response(405)

        try:
            key = int(rest[0])
        except ValueError:
            return consume.Response(404, b"{}")
        if key not in table:
            return consume.Response(404, b"{}")

        if method == "GET":
            return json_response(200, table[key])
        elif method == "PUT":
            table[key] = dict(body, id=key)
            return json_response(200, table[key])
        elif method == "DELETE":
            del table[key]
            return json_response(200, {})
        return consume.Response(405)


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def fake_api():
    return FakeApi("http://books.test")


@pytest.fixture
def api(fake_api):
    return consume.consume(fake_api.url, client=fake_api)
