import json

import pytest

import consume
from consume import Collection, Consumer, InvalidArgument, Model


class TestConstruction:
    def test_instantiates_correctly(self):
        url = "https://unicorns.rainbows"
        api = consume.consume(url)
        assert isinstance(api, Consumer)
        assert api.url == url

    @pytest.mark.parametrize("url", [123, None, b"https://x.test", ""])
    def test_rejects_non_string_url(self, url):
        with pytest.raises(InvalidArgument, match="URL must be a string"):
            consume.consume(url)

    def test_default_options(self):
        api = consume.consume("https://unicorns.rainbows")
        assert api.options == {
            "method": "GET",
            "credentials": True,
            "headers": {"Content-Type": "application/json"},
        }

    def test_merges_passed_options(self):
        api = consume.consume(
            "https://unicorns.rainbows", {"credentials": False, "mode": "cors"}
        )
        assert api.options == {
            "method": "GET",
            "credentials": False,
            "mode": "cors",
            "headers": {"Content-Type": "application/json"},
        }

    def test_merges_headers(self):
        api = consume.consume(
            "https://unicorns.rainbows",
            {"headers": {"Authorization": "Bearer x", "Content-Type": "a/b"}},
        )
        assert api.options["headers"] == {
            "Content-Type": "a/b",
            "Authorization": "Bearer x",
        }

    def test_options_are_not_shared(self):
        options = {"headers": {"X-Foo": "1"}}
        api = consume.consume("https://unicorns.rainbows", options)
        options["headers"]["X-Foo"] = "2"
        assert api.options["headers"]["X-Foo"] == "1"
        assert consume.DEFAULT_OPTIONS["headers"] == {
            "Content-Type": "application/json"
        }

    def test_options_are_read_only(self):
        api = consume.consume("https://unicorns.rainbows")
        with pytest.raises(TypeError):
            api.options["method"] = "POST"
        with pytest.raises(AttributeError):
            api.url = "https://other.test"

    def test_repr(self):
        assert repr(consume.consume("https://x.test")) == (
            "<Consumer: https://x.test>"
        )


class TestPathResolution:
    def test_chaining_properties_updates_url(self):
        api = consume.consume("https://unicorns.rainbows")

        assert api.users.url == "https://unicorns.rainbows/users"
        assert api.users[123].url == "https://unicorns.rainbows/users/123"
        assert api.users[123].posts.url == (
            "https://unicorns.rainbows/users/123/posts"
        )
        assert api.users["me/profile"].url == (
            "https://unicorns.rainbows/users/me/profile"
        )

    def test_stored_chain_replayed(self):
        root = consume.consume("https://x.test")
        a = root.a
        b = a.b
        assert b[3].url == root.a.b[3].url == root.url + "/a/b/3"
        assert root.child("a", "b", 3) == root.a.b[3]

    def test_keeps_options_and_client(self, fake_api):
        root = consume.consume(
            "https://x.test", {"credentials": False}, client=fake_api
        )
        child = root.users[1]
        assert child.options == root.options
        assert child._client is fake_api

    def test_no_caching(self):
        api = consume.consume("https://x.test")
        assert api.users is not api.users
        assert api.users == api.users
        assert api.users != api.posts

    def test_real_members_take_precedence(self):
        api = consume.consume("https://x.test")
        assert callable(api.find)
        assert api.url == "https://x.test"
        assert api["find"].url == "https://x.test/find"
        assert api.child("url").url == "https://x.test/url"

    def test_private_names_are_not_segments(self):
        api = consume.consume("https://x.test")
        with pytest.raises(AttributeError):
            api._secret
        with pytest.raises(AttributeError):
            api.__deepcopy__
        assert not hasattr(api, "_foo")


class TestAsModel:
    def test_is_fluent(self, api):
        class Book(Model):
            pass

        books = api.books
        assert books.as_model(Book) is books

    def test_rejects_non_models(self, api):
        with pytest.raises(InvalidArgument):
            api.books.as_model(dict)
        with pytest.raises(InvalidArgument):
            api.books.as_model(Model({}, api))

    def test_find_collects_into_model(self, api, loop):
        class Book(Model):
            pass

        book = loop.run_until_complete(api.books.as_model(Book).find(1))
        assert type(book) is Book
        assert book.title == "The Great Gatsby"

    def test_children_start_with_default_model(self, api):
        class Book(Model):
            pass

        assert api.books.as_model(Book).child(1)._model is Model


class TestAll:
    def test_retrieves_data(self, api, loop):
        books = loop.run_until_complete(api.books.all())

        assert isinstance(books, Collection)
        assert len(books) == 2
        assert all(isinstance(book, Model) for book in books)
        assert [book.id for book in books] == [1, 2]
        assert all(book.stored for book in books)

    def test_object_response(self, loop):
        async def fetch(url, options):
            return consume.Response(200, b'{"name": "me"}')

        api = consume.consume("https://x.test", client=fetch)
        profile = loop.run_until_complete(api.profile.all())
        assert isinstance(profile, Model)
        assert profile.name == "me"

    def test_404(self, api, loop):
        assert loop.run_until_complete(api.notAnEndpoint.all()) is None


class TestFind:
    def test_retrieves_data(self, api, loop, fake_api):
        book = loop.run_until_complete(api.books.find(1))

        assert isinstance(book, Model)
        assert book.id == 1
        assert book.primary_key == 1
        assert book.title == "The Great Gatsby"
        assert book.stored
        url, options = fake_api.calls[-1]
        assert url == "http://books.test/books/1"
        assert options["method"] == "GET"
        assert "body" not in options

    def test_returns_nothing_for_404(self, api, loop):
        assert loop.run_until_complete(api.notAnEndpoint.find(1)) is None
        assert loop.run_until_complete(api.books.find(999)) is None

    def test_rejects_for_any_other_status(self, api, loop):
        pending = api.thisEndpointErrors.find(1)
        with pytest.raises(consume.RemoteRejection) as exc:
            loop.run_until_complete(pending)
        assert exc.value.status_code == 400
        assert exc.value.response.status_code == 400
        assert "400" in str(exc.value)

    def test_empty_body(self, loop):
        async def fetch(url, options):
            return consume.Response(204)

        api = consume.consume("https://x.test", client=fetch)
        assert loop.run_until_complete(api.books.find(1)) is None

    def test_transport_failure_propagates(self, loop):
        async def fetch(url, options):
            raise ConnectionRefusedError()

        api = consume.consume("https://x.test", client=fetch)
        with pytest.raises(ConnectionRefusedError):
            loop.run_until_complete(api.books.find(1))


class TestCreate:
    def test_creates_a_new_resource(self, api, loop, fake_api):
        data = {"title": "The Catcher in the Rye", "authorId": 3}
        book = loop.run_until_complete(api.books.create(data))

        assert isinstance(book, Model)
        assert book.stored
        assert book.title == data["title"]
        assert book.authorId == data["authorId"]
        assert book.primary_key == 3

        url, options = fake_api.calls[-1]
        assert url == "http://books.test/books"
        assert options["method"] == "POST"
        assert json.loads(options["body"]) == data
        assert options["headers"] == {"Content-Type": "application/json"}
        assert options["credentials"] is True

    def test_404_is_rejected(self, api, loop):
        with pytest.raises(consume.RemoteRejection):
            loop.run_until_complete(api.notAnEndpoint.create({}))

    def test_extra_options_passed_to_fetch(self, fake_api, loop):
        api = consume.consume(
            fake_api.url, {"mode": "cors"}, client=fake_api
        )
        loop.run_until_complete(api.books.create({"title": "x"}))
        _, options = fake_api.calls[-1]
        assert options["mode"] == "cors"


class TestUpdate:
    def test_updates_an_existing_resource(self, api, loop, fake_api):
        book = loop.run_until_complete(api.books.find(1))
        updated = loop.run_until_complete(
            api.books.update(1, {"title": "A changed title"})
        )

        assert isinstance(updated, Model)
        assert updated.title == "A changed title"
        assert updated.title != book.title
        url, options = fake_api.calls[-1]
        assert url == "http://books.test/books/1"
        assert options["method"] == "PUT"

    def test_404_is_rejected(self, api, loop):
        with pytest.raises(consume.RemoteRejection) as exc:
            loop.run_until_complete(api.books.update(999, {}))
        assert exc.value.status_code == 404


class TestDelete:
    def test_deletes_a_resource(self, api, loop, fake_api):
        assert loop.run_until_complete(api.books.delete(1)) is True
        assert 1 not in fake_api.db["books"]
        assert fake_api.calls[-1][1]["method"] == "DELETE"

    def test_failure_is_not_raised(self, api, loop):
        assert loop.run_until_complete(api.books.delete(999)) is False
        errors = api.thisEndpointErrors
        assert loop.run_until_complete(errors.delete(1)) is False
