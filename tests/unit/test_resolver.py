"""
Unit tests for resource resolution.
"""

import pytest

from simplewebserver.http import resolver as resolver_module
from simplewebserver.http.resolver import ResourceResolver
from simplewebserver.http.status_codes import HTTPStatus


@pytest.fixture
def resolver(docroot):
    return ResourceResolver(docroot)


class TestResourceResolver:
    """Tests for ResourceResolver.resolve()."""

    def test_existing_file(self, resolver, docroot):
        resource = resolver.resolve("test.html")

        assert resource.exists is True
        assert resource.status == HTTPStatus.OK
        assert resource.path == (docroot / "test.html").resolve()
        assert resource.mime_type == "text/html"

    def test_mime_type_ignores_extension(self, resolver):
        """A PNG is still served as text/html."""
        resource = resolver.resolve("logo.png")

        assert resource.status == HTTPStatus.OK
        assert resource.mime_type == "text/html"

    def test_nested_file(self, resolver, docroot):
        resource = resolver.resolve("docs/page.html")
        assert resource.path == (docroot / "docs" / "page.html").resolve()

    def test_missing_file_falls_back(self, resolver, docroot):
        resource = resolver.resolve("missing.png")

        assert resource.exists is False
        assert resource.status == HTTPStatus.NOT_FOUND
        assert resource.path == docroot.resolve() / "404page.html"
        assert resource.mime_type == "text/html"

    def test_directory_is_not_found(self, resolver):
        assert resolver.resolve("docs").status == HTTPStatus.NOT_FOUND

    def test_file_used_as_directory_is_not_found(self, resolver):
        assert resolver.resolve("test.html/x").status == HTTPStatus.NOT_FOUND

    def test_path_outside_root_is_not_found(self, resolver, docroot):
        (docroot.parent / "secret.txt").write_text("secret")

        resource = resolver.resolve("../secret.txt")

        assert resource.status == HTTPStatus.NOT_FOUND
        assert resource.path.name == "404page.html"

    def test_custom_fallback_and_mime(self, docroot):
        resolver = ResourceResolver(docroot, fallback_document="oops.html", mime_type="text/plain")

        found = resolver.resolve("notes.txt")
        missing = resolver.resolve("nope")

        assert found.mime_type == "text/plain"
        assert missing.path == docroot.resolve() / "oops.html"

    @pytest.mark.parametrize("path", ["a\x00b", "docs/\x00", "\x00"])
    def test_embedded_null_is_not_found(self, resolver, docroot, path):
        resource = resolver.resolve(path)

        assert resource.status == HTTPStatus.NOT_FOUND
        assert resource.exists is False
        assert resource.path == docroot.resolve() / "404page.html"

    def test_other_open_errors_propagate(self, resolver, monkeypatch):
        """Permission problems are not a 404: the caller must see them."""
        def denied(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(resolver_module, "open", denied, raising=False)

        with pytest.raises(PermissionError):
            resolver.resolve("test.html")

    def test_relative_root(self, docroot, monkeypatch):
        """The default root is the working directory."""
        monkeypatch.chdir(docroot)

        resource = ResourceResolver().resolve("logo.png")

        assert resource.status == HTTPStatus.OK
        assert resource.path == (docroot / "logo.png").resolve()
