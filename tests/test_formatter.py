import unittest
from pathlib import Path

from config.models import RepoConfig
from core.contracts.models import ChangeContext
from core.formatter.jinja_formatter import Jinja2Formatter, render
from utils.errors import FormatterError


class TestJinja2Formatter(unittest.TestCase):
    def setUp(self):
        # Create a dummy context for testing
        self.ctx = ChangeContext(
            repository_root=Path("/work/repo"),
            current_branch="feature/TK-42-add-login",
            requested_target="develop",
            resolved_target="origin/develop",
            commits="b2 add login\na1 scaffold",
            commit_messages="### add login\n",
            diff_stat=" a.py | 2 +-",
            diff="diff --git a/a.py b/a.py",
        )

    def test_analyze_without_repo_config(self):
        text = render("analyze_changes.j2", ctx=self.ctx, title="[TK-42] add login", repo_config=None, config_file="")
        self.assertIn("**Current Branch:** feature/TK-42-add-login", text)
        self.assertIn("**Target Branch:** develop", text)
        self.assertIn("**Commits:** 2", text)
        self.assertIn("**Suggested Title:** [TK-42] add login", text)
        self.assertNotIn("Repo Config", text)

    def test_analyze_with_repo_config(self):
        config = RepoConfig(reviewers=["alice", "bob"], customPrompt="Focus on security")
        text = render("analyze_changes.j2", ctx=self.ctx, title="t", repo_config=config, config_file=".pr-mcp.json")
        self.assertIn("### Repo Config (.pr-mcp.json)", text)
        self.assertIn("- Reviewers: alice, bob", text)
        self.assertIn("- Target: develop", text)
        self.assertIn("- Custom Prompt: Focus on security", text)

    def test_empty_sections_have_placeholders(self):
        ctx = self.ctx.model_copy(update={"diff_stat": "", "commit_messages": ""})
        text = render("analyze_changes.j2", ctx=ctx, title="t", repo_config=None, config_file="")
        self.assertIn("No changes", text)
        self.assertIn("No commit messages", text)

    def test_description_toggles_diff(self):
        with_diff = render(
            "pr_description.j2", ctx=self.ctx, title="t", include_diff=True, repo_config=None, checklist="- [ ] b2"
        )
        without_diff = render(
            "pr_description.j2", ctx=self.ctx, title="t", include_diff=False, repo_config=None, checklist="- [ ] b2"
        )
        self.assertIn("### Code Diff\n```diff\ndiff --git a/a.py b/a.py\n```", with_diff)
        self.assertNotIn("### Code Diff", without_diff)
        self.assertTrue(without_diff.endswith("Focus on WHAT changed and WHY."))

    def test_created_omits_unset_lines(self):
        text = render("pr_created.j2", title="t", url="https://x/pull/1", target="develop",
                      reviewers="", draft=False, pushed=True)
        self.assertNotIn("Reviewers", text)
        self.assertNotIn("Draft", text)
        self.assertNotIn("Push failed", text)

    def test_template_not_found(self):
        formatter = Jinja2Formatter()
        with self.assertRaises(FormatterError):
            formatter.render("non_existent_template.j2")

    def test_missing_value_is_an_error(self):
        with self.assertRaises(FormatterError):
            render("pr_updated.j2")

    def test_custom_template_dir(self):
        custom_template_dir = Path("./tests/custom_templates")
        custom_template_dir.mkdir(exist_ok=True)
        custom_template_path = custom_template_dir / "custom.j2"
        with open(custom_template_path, "w") as f:
            f.write("Custom: {{ title }}")

        try:
            formatter = Jinja2Formatter(template_dir=str(custom_template_dir))
            self.assertEqual(formatter.render("custom.j2", title="hello"), "Custom: hello")
        finally:
            # Clean up the custom template
            custom_template_path.unlink()
            custom_template_dir.rmdir()


if __name__ == "__main__":
    unittest.main()
