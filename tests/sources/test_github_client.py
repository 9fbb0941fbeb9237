"""Tests for the GitHub REST source, using httpx.MockTransport."""

import httpx
import pytest

from debt_tracker.config import TrackerConfig
from debt_tracker.exceptions import InvalidRepositoryError, UpstreamUnavailableError
from debt_tracker.sources import GitHubClient, RemoteFile, RepoRef, parse_repository

REF = RepoRef("octo", "widgets")
RAW = "https://raw.githubusercontent.com/octo/widgets/main"


def file_item(path, size=100):
    name = path.rsplit("/", 1)[-1]
    return {
        "type": "file",
        "name": name,
        "path": path,
        "size": size,
        "download_url": f"{RAW}/{path}",
    }


def dir_item(path):
    return {"type": "dir", "name": path.rsplit("/", 1)[-1], "path": path}


def make_client(routes, config=None, seen=None):
    """Client whose transport answers from a {path: response} map.

    A route value may be a JSON-able object (served with 200) or an
    httpx.Response. Unknown paths answer 404.
    """

    def handler(request):
        if seen is not None:
            seen.append(request)
        key = request.url.path
        if request.url.host != "api.github.com":
            key = str(request.url)
        value = routes.get(key)
        if value is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(value, httpx.Response):
            return value
        if isinstance(value, str):
            return httpx.Response(200, text=value)
        return httpx.Response(200, json=value)

    http = httpx.Client(
        transport=httpx.MockTransport(handler), base_url="https://api.github.com"
    )
    return GitHubClient(config or TrackerConfig(), client=http)


class TestParseRepository:
    @pytest.mark.parametrize(
        "identifier",
        [
            "https://github.com/octo/widgets",
            "https://github.com/octo/widgets/",
            "https://github.com/octo/widgets.git",
            "http://www.github.com/octo/widgets/tree/main/src",
            "git@github.com:octo/widgets.git",
            "github.com/octo/widgets",
            "octo/widgets",
            "  octo/widgets  ",
        ],
    )
    def test_accepted_forms(self, identifier):
        assert parse_repository(identifier) == REF

    @pytest.mark.parametrize(
        "identifier",
        ["", "widgets", "https://github.com/octo", "https://gitlab.com/octo", "a/b/c"],
    )
    def test_rejected(self, identifier):
        with pytest.raises(InvalidRepositoryError):
            parse_repository(identifier)

    def test_full_name(self):
        assert parse_repository("octo/widgets").full_name == "octo/widgets"


class TestRepository:
    def test_metadata(self):
        client = make_client(
            {
                "/repos/octo/widgets": {
                    "full_name": "octo/widgets",
                    "stargazers_count": 42,
                    "language": "TypeScript",
                }
            }
        )
        info = client.get_repository(REF)
        assert info.full_name == "octo/widgets"
        assert info.stars == 42
        assert info.language == "TypeScript"

    def test_missing_repository(self):
        client = make_client({})
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            client.get_repository(REF)
        assert exc_info.value.status_code == 404
        assert exc_info.value.service == "GitHub"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(
            transport=httpx.MockTransport(handler), base_url="https://api.github.com"
        )
        client = GitHubClient(TrackerConfig(), client=http)
        with pytest.raises(UpstreamUnavailableError):
            client.get_repository(REF)

    def test_headers(self):
        seen = []
        client = make_client(
            {"/repos/octo/widgets": {"full_name": "octo/widgets"}},
            config=TrackerConfig(github_token="ghp_secret"),
            seen=seen,
        )
        client.get_repository(REF)
        headers = seen[0].headers
        assert headers["Authorization"] == "token ghp_secret"
        assert headers["User-Agent"] == "AIDebtTracker"
        assert headers["Accept"] == "application/vnd.github.v3+json"

    def test_no_token_no_authorization(self):
        seen = []
        client = make_client({"/repos/octo/widgets": {}}, seen=seen)
        client.get_repository(REF)
        assert "Authorization" not in seen[0].headers


class TestListCodeFiles:
    def test_breadth_first_walk_and_filters(self):
        client = make_client(
            {
                "/repos/octo/widgets/contents/": [
                    file_item("README.md"),
                    file_item("index.ts"),
                    file_item("huge.js", size=500_000),
                    dir_item("src"),
                    dir_item("node_modules"),
                    dir_item(".github"),
                ],
                "/repos/octo/widgets/contents/src": [
                    file_item("src/App.TSX"),
                    file_item("src/util.py"),
                ],
            }
        )
        files = client.list_code_files(REF)
        assert [f.path for f in files] == ["index.ts", "src/App.TSX", "src/util.py"]
        assert files[0].download_url == f"{RAW}/index.ts"

    def test_max_files_cap(self):
        client = make_client(
            {"/repos/octo/widgets/contents/": [file_item(f"m{i}.js") for i in range(10)]},
            config=TrackerConfig(max_files=4),
        )
        assert len(client.list_code_files(REF)) == 4

    def test_root_failure_raises(self):
        client = make_client({"/repos/octo/widgets/contents/": httpx.Response(403)})
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            client.list_code_files(REF)
        assert exc_info.value.status_code == 403

    def test_subdirectory_failure_skipped(self):
        client = make_client(
            {
                "/repos/octo/widgets/contents/": [file_item("a.go"), dir_item("locked")],
                "/repos/octo/widgets/contents/locked": httpx.Response(500),
            }
        )
        assert [f.path for f in client.list_code_files(REF)] == ["a.go"]

    def test_subdirectory_html_body_skipped(self):
        client = make_client(
            {
                "/repos/octo/widgets/contents/": [file_item("a.go"), dir_item("proxy")],
                "/repos/octo/widgets/contents/proxy": "<html>gateway</html>",
            }
        )
        assert [f.path for f in client.list_code_files(REF)] == ["a.go"]

    def test_root_html_body_raises(self):
        client = make_client({"/repos/octo/widgets/contents/": "<html>gateway</html>"})
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            client.list_code_files(REF)
        assert exc_info.value.status_code == 200


class TestFetchFileText:
    def test_success(self):
        client = make_client({f"{RAW}/a.py": "print('hi')\n"})
        remote = RemoteFile("a.py", "a.py", 12, f"{RAW}/a.py")
        assert client.fetch_file_text(remote) == "print('hi')\n"

    def test_failure_returns_none(self):
        client = make_client({})
        assert client.fetch_file_text(RemoteFile("a.py", "a.py", 1, f"{RAW}/a.py")) is None

    def test_no_download_url(self):
        client = make_client({})
        assert client.fetch_file_text(RemoteFile("a.py", "a.py", 1, None)) is None

    def test_oversized_content_skipped(self):
        client = make_client(
            {f"{RAW}/a.py": "x" * 101}, config=TrackerConfig(max_content_chars=100)
        )
        assert client.fetch_file_text(RemoteFile("a.py", "a.py", 1, f"{RAW}/a.py")) is None


def commit_item(sha, message, name="Ada", login="ada", date="2024-05-01T10:00:00Z"):
    return {
        "sha": sha,
        "commit": {"message": message, "author": {"name": name, "date": date}},
        "author": {"login": login},
    }


class TestHistory:
    def test_oldest_first_with_patches(self):
        seen = []
        client = make_client(
            {
                "/repos/octo/widgets/commits": [
                    commit_item("2" * 40, "second"),
                    commit_item("1" * 40, "first"),
                ],
                f"/repos/octo/widgets/commits/{'1' * 40}": {
                    "stats": {"additions": 3, "deletions": 1},
                    "files": [
                        {"filename": "a.py", "patch": "+x\n-y", "additions": 3, "deletions": 1}
                    ],
                },
                f"/repos/octo/widgets/commits/{'2' * 40}": {
                    "stats": {"additions": 0, "deletions": 0},
                    "files": [{"filename": "logo.png"}],
                },
            },
            seen=seen,
        )
        commits = client.history(REF, 2)

        assert [c.message for c in commits] == ["first", "second"]
        assert commits[0].additions == 3
        assert commits[0].files[0].patch == "+x\n-y"
        assert commits[1].files[0].patch == ""
        assert commits[0].author == "Ada"
        assert commits[0].timestamp == "2024-05-01T10:00:00Z"
        assert seen[0].url.params["per_page"] == "2"

    def test_per_page_capped(self):
        seen = []
        client = make_client({"/repos/octo/widgets/commits": []}, seen=seen)
        assert client.history(REF, 100) == []
        assert seen[0].url.params["per_page"] == "30"

    def test_author_fallbacks(self):
        client = make_client({})
        by_login = {"sha": "a" * 40, "commit": {"message": "m"}, "author": {"login": "gh-user"}}
        anonymous = {"sha": "b" * 40, "commit": {"message": "m"}, "author": None}
        assert client.fetch_commit_diff(REF, by_login).author == "gh-user"
        assert client.fetch_commit_diff(REF, anonymous).author == "unknown"

    def test_detail_failure_degrades(self):
        client = make_client(
            {"/repos/octo/widgets/commits": [commit_item("3" * 40, "broken")]}
        )
        (commit,) = client.history(REF, 5)
        assert commit.degraded
        assert commit.files == []
        assert commit.message == "broken"

    def test_html_detail_degrades(self):
        sha = "4" * 40
        client = make_client(
            {
                "/repos/octo/widgets/commits": [commit_item(sha, "proxied")],
                f"/repos/octo/widgets/commits/{sha}": "<html>gateway</html>",
            }
        )
        (commit,) = client.history(REF, 5)
        assert commit.degraded
        assert commit.message == "proxied"

    def test_non_object_detail_degrades(self):
        sha = "5" * 40
        client = make_client(
            {
                "/repos/octo/widgets/commits": [commit_item(sha, "odd")],
                f"/repos/octo/widgets/commits/{sha}": ["not", "a", "commit"],
            }
        )
        (commit,) = client.history(REF, 5)
        assert commit.degraded
        assert commit.files == []

    def test_listing_failure_raises(self):
        client = make_client({"/repos/octo/widgets/commits": httpx.Response(409)})
        with pytest.raises(UpstreamUnavailableError):
            client.history(REF, 5)


class TestLifecycle:
    def test_injected_client_not_closed(self):
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with GitHubClient(TrackerConfig(), client=http):
            pass
        assert not http.is_closed

    def test_owned_client_closed(self):
        client = GitHubClient(TrackerConfig())
        client.close()
        assert client._client.is_closed
