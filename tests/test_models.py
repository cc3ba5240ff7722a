"""Tests for project, branch and URL value types."""

from __future__ import annotations

import unittest

from fakes import make_repo

from git_smart_hub.config import HubConfig
from git_smart_hub.exceptions import ContextError
from git_smart_hub.models import Branch, GitURL, Project, ResolvedURL


class GitURLTests(unittest.TestCase):
    def test_parse_keeps_user_host_and_path(self) -> None:
        url = GitURL.parse("ssh://git@github.com:2222/alice/repo.git")

        self.assertEqual(url.scheme, "ssh")
        self.assertEqual(url.user, "git")
        self.assertEqual(url.host, "github.com")
        self.assertEqual(url.port, 2222)

    def test_parse_keeps_host_case(self) -> None:
        url = GitURL.parse("https://Me@GHE.Corp.com:8443/alice/repo.git")

        self.assertEqual((url.user, url.host, url.port), ("Me", "GHE.Corp.com", 8443))
        self.assertEqual(str(url), "https://Me@GHE.Corp.com:8443/alice/repo.git")
        self.assertEqual(url.path, "/alice/repo.git")
        self.assertEqual(str(url), "ssh://git@github.com:2222/alice/repo.git")

    def test_invalid_uris_raise_value_error(self) -> None:
        for uri in ("ssh://host/has space.git", "no-scheme/at/all", "https://host:notaport/x"):
            with self.subTest(uri=uri), self.assertRaises(ValueError):
                GitURL.parse(uri)


class ProjectTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = make_repo()

    def test_from_url_extracts_owner_and_name(self) -> None:
        project = Project.from_url(GitURL.parse("https://github.com/alice/repo.git"), self.repo)

        assert project is not None
        self.assertEqual((project.owner, project.name, project.host), ("alice", "repo", "github.com"))

    def test_from_url_ignores_unknown_hosts(self) -> None:
        url = GitURL.parse("https://gitlab.com/alice/repo.git")

        self.assertIsNone(Project.from_url(url, self.repo))

    def test_from_url_needs_owner_and_name(self) -> None:
        self.assertIsNone(Project.from_url(GitURL.parse("https://github.com/alice"), self.repo))

    def test_ssh_alias_host_is_normalized(self) -> None:
        project = Project.from_url(GitURL.parse("ssh://git@ssh.github.com/alice/repo.git"), self.repo)

        assert project is not None
        self.assertEqual(project.host, "github.com")

    def test_ssh_alias_follows_configured_default_host(self) -> None:
        repo = make_repo(config=HubConfig(default_host="git.example.com"))
        project = Project("alice", "repo", "ssh.git.example.com", local_repo=repo)

        self.assertEqual(project.host, "git.example.com")

    def test_spaces_in_name_become_dashes_and_host_defaults(self) -> None:
        project = Project("alice", "my repo")

        self.assertEqual(project.name, "my-repo")
        self.assertEqual(project.host, "github.com")

    def test_equality_uses_owner_and_name_only(self) -> None:
        first = Project("alice", "repo", "github.com", local_repo=self.repo)
        second = Project("alice", "repo", "git.example.com")

        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertNotEqual(first, Project("bob", "repo"))

    def test_owned_by_returns_a_copy(self) -> None:
        project = Project("alice", "repo")
        fork = project.owned_by("bob")

        self.assertEqual(fork.name_with_owner, "bob/repo")
        self.assertEqual(project.owner, "alice")

    def test_remote_finds_matching_remote(self) -> None:
        project = Project("alice", "repo", local_repo=self.repo)

        remote = project.remote
        assert remote is not None
        self.assertEqual(remote.name, "origin")


class ProjectUrlTests(unittest.TestCase):
    def test_web_url(self) -> None:
        project = Project("alice", "repo")

        self.assertEqual(project.web_url(), "https://github.com/alice/repo")
        self.assertEqual(project.web_url("/issues"), "https://github.com/alice/repo/issues")

    def test_wiki_web_urls(self) -> None:
        wiki = Project("alice", "repo.wiki")

        self.assertEqual(wiki.web_url("/commits/abc"), "https://github.com/alice/repo/wiki/_history")
        self.assertEqual(wiki.web_url("/pages"), "https://github.com/alice/repo/wiki/_pages")
        self.assertEqual(wiki.web_url("/wiki"), "https://github.com/alice/repo/wiki")
        self.assertEqual(wiki.web_url(), "https://github.com/alice/repo/wiki")

    def test_git_url_schemes(self) -> None:
        project = Project("alice", "repo")

        self.assertEqual(project.git_url(https=True), "https://github.com/alice/repo.git")
        self.assertEqual(project.git_url(private=True), "git@github.com:alice/repo.git")
        self.assertEqual(project.git_url(), "git://github.com/alice/repo.git")

    def test_privacy_inferred_from_host_without_metadata(self) -> None:
        enterprise = Project("alice", "repo", "git.example.com")

        self.assertTrue(enterprise.is_private)
        self.assertTrue(enterprise.git_url().startswith("git@"))

    def test_privacy_prefers_repository_metadata(self) -> None:
        public = Project("alice", "repo", "git.example.com", repo_data={"private": False})
        private = Project("alice", "repo", repo_data={"private": True})

        self.assertFalse(public.is_private)
        self.assertEqual(private.git_url(), "git@github.com:alice/repo.git")


class BranchTests(unittest.TestCase):
    def test_short_name_strips_ref_namespace(self) -> None:
        self.assertEqual(Branch(None, "refs/heads/main").short_name, "main")
        self.assertEqual(Branch(None, "refs/remotes/origin/feature/x").short_name, "feature/x")
        self.assertEqual(Branch(None, "refs/tags/v1.0").short_name, "v1.0")

    def test_remote_name(self) -> None:
        self.assertTrue(Branch(None, "refs/remotes/upstream/main").is_remote)
        self.assertEqual(Branch(None, "refs/remotes/upstream/main").remote_name, "upstream")
        with self.assertRaises(ContextError):
            Branch(None, "refs/heads/main").remote_name

    def test_is_master_without_repository(self) -> None:
        self.assertTrue(Branch(None, "refs/heads/master").is_master)
        self.assertFalse(Branch(None, "refs/heads/main").is_master)

    def test_is_master_compares_short_names(self) -> None:
        repo = make_repo()

        self.assertTrue(Branch(repo, "refs/heads/main").is_master)
        self.assertFalse(Branch(repo, "refs/heads/feature").is_master)


class ResolvedURLTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = make_repo()

    def test_resolves_project_and_path(self) -> None:
        resolved = ResolvedURL.resolve("https://github.com/alice/repo/pull/12", self.repo)

        assert resolved is not None
        self.assertEqual(resolved.project_owner, "alice")
        self.assertEqual(resolved.project_name, "repo")
        self.assertEqual(resolved.project_path, "pull/12")
        self.assertEqual(str(resolved), "https://github.com/alice/repo/pull/12")

    def test_project_path_absent_for_project_root(self) -> None:
        resolved = ResolvedURL.resolve("https://github.com/alice/repo", self.repo)

        assert resolved is not None
        self.assertIsNone(resolved.project_path)

    def test_non_http_or_foreign_urls_are_not_resolved(self) -> None:
        self.assertIsNone(ResolvedURL.resolve("git://github.com/alice/repo.git", self.repo))
        self.assertIsNone(ResolvedURL.resolve("https://example.org/alice/repo", self.repo))
        self.assertIsNone(ResolvedURL.resolve("https://github.com/bad path", self.repo))


if __name__ == "__main__":
    unittest.main()
