import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from config.loader import load_config
from config.logic import (
    load_global_config,
    load_repo_config,
    load_repo_config_file,
    resolve_target_branch_name,
    save_global_config,
)
from config.models import GlobalConfig, RepoConfig
from utils.errors import ConfigError


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name: str, content: str) -> Path:
        path = self.dir / name
        path.write_text(content, encoding="utf-8")
        return path


class TestLoader(ConfigTestCase):

    def test_load_json(self):
        path = self.write("c.json", '{"reviewers": ["alice"]}')
        self.assertEqual(load_config(path), {"reviewers": ["alice"]})

    def test_load_yaml_with_env_substitution(self):
        path = self.write("c.yaml", "customPrompt: ${PR_MCP_TEST_PROMPT}\ndraft: true\n")
        with patch.dict(os.environ, {"PR_MCP_TEST_PROMPT": "Focus on security"}):
            self.assertEqual(load_config(path), {"customPrompt": "Focus on security", "draft": True})

    def test_missing_env_var(self):
        path = self.write("c.yml", "customPrompt: ${PR_MCP_DEFINITELY_UNSET}\n")
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("PR_MCP_DEFINITELY_UNSET", None)
            with self.assertRaises(ConfigError):
                load_config(path)

    def test_malformed_json(self):
        path = self.write("c.json", "{not json")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_non_object(self):
        path = self.write("c.json", "[1, 2]")
        with self.assertRaisesRegex(ConfigError, "must contain an object"):
            load_config(path)

    def test_empty_yaml(self):
        path = self.write("c.yaml", "")
        self.assertEqual(load_config(path), {})


class TestGlobalConfig(ConfigTestCase):

    def test_defaults_when_missing(self):
        config = load_global_config(self.dir / "missing.json")
        self.assertEqual(config.default_target, "develop")

    def test_reads_default_target(self):
        path = self.write("mcp-config.json", '{"defaultTarget": "main"}')
        self.assertEqual(load_global_config(path).default_target, "main")

    def test_malformed_falls_back(self):
        path = self.write("mcp-config.json", "{oops")
        self.assertEqual(load_global_config(path).default_target, "develop")

    def test_save_round_trip(self):
        path = self.dir / "nested" / "mcp-config.json"
        save_global_config(GlobalConfig(defaultTarget="main"), path)

        self.assertEqual(json.loads(path.read_text()), {"defaultTarget": "main"})
        self.assertEqual(load_global_config(path).default_target, "main")


class TestRepoConfig(ConfigTestCase):

    def test_absent(self):
        self.assertIsNone(load_repo_config(self.dir))

    def test_json_with_aliases(self):
        self.write(".pr-mcp.json", json.dumps({
            "reviewers": ["bob", "alice", "bob"],
            "targetBranch": "main",
            "customPrompt": "Focus on security",
            "draft": True,
            "ticketPattern": "JIRA-\\d+",
            "titlePrefix": "[WIP]",
            "excludeFiles": ["*.lock"],
            "team": "payments",
        }))

        path, config = load_repo_config_file(self.dir)

        self.assertEqual(path.name, ".pr-mcp.json")
        self.assertEqual(config.reviewers, ["bob", "alice", "bob"])
        self.assertEqual(config.target_branch, "main")
        self.assertTrue(config.draft)
        self.assertEqual(config.ticket_pattern, "JIRA-\\d+")
        self.assertEqual(config.title_prefix, "[WIP]")
        self.assertEqual(config.exclude_files, ["*.lock"])
        self.assertEqual(config.model_dump(by_alias=True, exclude_unset=True)["team"], "payments")

    def test_json_preferred_over_yaml(self):
        self.write(".pr-mcp.yaml", "targetBranch: from-yaml\n")
        self.write(".pr-mcp.json", '{"targetBranch": "from-json"}')
        self.assertEqual(load_repo_config(self.dir).target_branch, "from-json")

    def test_yaml_variant(self):
        self.write(".pr-mcp.yml", "reviewers:\n  - carol\n")
        self.assertEqual(load_repo_config(self.dir).reviewers, ["carol"])

    def test_malformed_is_ignored(self):
        self.write(".pr-mcp.json", '{"reviewers": ')
        self.assertIsNone(load_repo_config(self.dir))

    def test_wrong_types_are_ignored(self):
        self.write(".pr-mcp.json", '{"reviewers": 42}')
        self.assertIsNone(load_repo_config(self.dir))


class TestTargetPrecedence(unittest.TestCase):

    def test_argument_wins(self):
        self.assertEqual(
            resolve_target_branch_name("feature/base", RepoConfig(targetBranch="main"), GlobalConfig()),
            "feature/base",
        )

    def test_repo_config_then_global(self):
        global_config = GlobalConfig(defaultTarget="trunk")
        self.assertEqual(resolve_target_branch_name(None, RepoConfig(targetBranch="main"), global_config), "main")
        self.assertEqual(resolve_target_branch_name("", RepoConfig(), global_config), "trunk")
        self.assertEqual(resolve_target_branch_name(None, None, global_config), "trunk")

    def test_fallback(self):
        self.assertEqual(resolve_target_branch_name(None, None, None), "develop")


if __name__ == "__main__":
    unittest.main()
