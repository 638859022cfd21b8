import json
import os
import shutil
import subprocess
import unittest

from monodiff.analyzer.change_impact_analyzer import ChangeImpactAnalyzer
from monodiff.schema.errors import GitDiffError
from monodiff.utils.git_util import GitUtil
from tests.unit_tests.helper import BaseTestCase


@unittest.skipIf(shutil.which("git") is None, "git is not installed")
class TestGitWorkspace(BaseTestCase):
    """実際のgitリポジトリでgit diff => 影響範囲までを通して確認する"""

    def setUp(self):
        super().setUp()
        self.repo_dir = self.make_workspace_dir(
            {
                "": {"name": "root", "private": True},
                "packages/core": {"name": "@acme/core"},
                "packages/api": {"name": "@acme/api", "dependencies": {"@acme/core": "workspace:*", "express": "^4"}},
                "packages/web": {"name": "@acme/web", "devDependencies": {"@acme/api": "workspace:*"}},
                "packages/docs": {"name": "@acme/docs"},
            }
        )
        self.write_file(self.repo_dir, "packages/core/src/index.ts", "export const x = 1;\n")
        self.write_file(self.repo_dir, "node_modules/express/package.json", '{"name": "express"}')
        self.write_file(self.repo_dir, ".gitignore", "node_modules/\n")
        self.git("init", "-q")
        self.commit("initial")

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", "-c", "user.name=monodiff", "-c", "user.email=monodiff@example.com", *args],
            cwd=self.repo_dir,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def commit(self, message: str) -> None:
        self.git("add", "-A")
        self.git("commit", "-q", "--no-gpg-sign", "-m", message)

    def test_core_change_impacts_dependents(self):
        self.write_file(self.repo_dir, "packages/core/src/index.ts", "export const x = 2;\n")
        self.commit("change core")

        changed_files = GitUtil.changed_files(self.repo_dir, "HEAD~1")
        self.assertEqual(changed_files, [os.path.join("packages", "core", "src", "index.ts")])

        report = ChangeImpactAnalyzer(self.repo_dir).analyze("HEAD~1", "HEAD")
        self.assertEqual(report.changed, ["@acme/core"])
        self.assertEqual(report.impacted, ["@acme/api", "@acme/core", "@acme/web"])
        data = json.loads(report.to_json())
        self.assertEqual(data["graph"]["@acme/api"], ["@acme/core"])
        self.assertNotIn("express", data["graph"])

    def test_root_file_change(self):
        self.write_file(self.repo_dir, "README.md", "# acme\n")
        self.write_file(self.repo_dir, "packages/docs/guide.md", "guide\n")
        self.commit("docs")

        report = ChangeImpactAnalyzer(self.repo_dir).analyze("HEAD~1")
        self.assertEqual(report.changed, ["@acme/docs", "root"])
        self.assertEqual(report.impacted, ["@acme/docs", "root"])

    def test_no_changes(self):
        report = ChangeImpactAnalyzer(self.repo_dir).analyze("HEAD", "HEAD")
        self.assertEqual(report.changed, [])
        self.assertEqual(report.impacted, [])

    def test_unknown_ref(self):
        with self.assertRaises(GitDiffError) as cm:
            GitUtil.changed_files(self.repo_dir, "no-such-ref")
        self.assertIn("no-such-ref", str(cm.exception))
