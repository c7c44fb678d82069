"""Tests for the boilerplate content catalog (npminitlib_cli.catalog)."""

import json
from pathlib import Path

from npminitlib_cli.catalog import (
    DEFAULT_VERSION,
    SUBDIRECTORIES,
    TEMPLATES,
    ProjectSpec,
    build_catalog,
)


def _entries(spec):
    return {entry.relative_path: entry.content for entry in build_catalog(spec)}


class TestProjectSpec:
    def test_target_directory_is_resolved_under_cwd(self, tmp_path: Path):
        spec = ProjectSpec.from_name("foo-lib", cwd=tmp_path)
        assert spec.target_directory == (tmp_path / "foo-lib").resolve()
        assert spec.target_directory.is_absolute()

    def test_version_falls_back_to_default(self, tmp_path: Path):
        assert ProjectSpec.from_name("foo-lib", cwd=tmp_path).version == DEFAULT_VERSION == "0.0.1"
        assert ProjectSpec.from_name("foo-lib", version="", cwd=tmp_path).version == "0.0.1"

    def test_empty_author_becomes_none(self, tmp_path: Path):
        assert ProjectSpec.from_name("foo-lib", author="", cwd=tmp_path).author is None


class TestBuildCatalog:
    def test_entries_follow_registry_order(self, spec):
        assert [e.relative_path for e in build_catalog(spec)] == list(TEMPLATES)

    def test_expected_file_set(self, spec):
        assert set(_entries(spec)) == {
            "package.json",
            ".gitignore",
            ".gitattributes",
            "eslint.config.js",
            ".prettierrc",
            ".releaserc",
            "jest.config.js",
            ".npmignore",
            "commitlint.config.js",
            "tsconfig.json",
            "README.md",
            "CONFIGURATION.md",
            "LICENSE",
            ".env",
            "src/index.ts",
            ".github/workflows/release.yml",
        }

    def test_every_parent_is_root_or_fixed_subdirectory(self, spec):
        for path in _entries(spec):
            parent = str(Path(path).parent).replace("\\", "/")
            assert parent == "." or parent in SUBDIRECTORIES, path

    def test_generation_is_deterministic(self, spec):
        assert build_catalog(spec) == build_catalog(spec)

    def test_entry_point_is_empty(self, spec):
        assert _entries(spec)["src/index.ts"] == ""


class TestPackageJson:
    def test_name_version_and_author(self, spec):
        manifest = json.loads(_entries(spec)["package.json"])
        assert manifest["name"] == "foo-lib"
        assert manifest["version"] == "1.2.3"
        assert manifest["author"] == "octocat"
        assert manifest["license"] == "MIT"

    def test_author_omitted_when_unknown(self, tmp_path: Path):
        manifest = json.loads(_entries(ProjectSpec.from_name("foo-lib", cwd=tmp_path))["package.json"])
        assert "author" not in manifest
        assert manifest["version"] == "0.0.1"

    def test_duplicate_keys_resolved_last_write_wins(self, spec):
        manifest = json.loads(_entries(spec)["package.json"])
        assert manifest["scripts"]["pre-commit"] == "echo 'Commit complete!'"
        assert manifest["devDependencies"]["semantic-release"] == "^24.0.0"

    def test_lint_staged_config(self, spec):
        manifest = json.loads(_entries(spec)["package.json"])
        assert manifest["lint-staged"]["*.ts"] == ["eslint --fix", "prettier --write"]

    def test_two_space_indentation(self, spec):
        assert _entries(spec)["package.json"].startswith('{\n  "name": "foo-lib",')


class TestOtherTemplates:
    def test_readme_interpolates_name(self, spec):
        assert _entries(spec)["README.md"] == "# foo-lib Library\n\n## Description\n"

    def test_license_names_year_and_holder(self, spec):
        license_text = _entries(spec)["LICENSE"]
        assert f"Copyright (c) {spec.year} octocat" in license_text
        assert "MIT License" in license_text

    def test_release_config_keeps_message_template(self, spec):
        config = json.loads(_entries(spec)[".releaserc"])
        assert config["branches"] == ["main"]
        assert config["plugins"][0] == "@semantic-release/commit-analyzer"
        git_plugin = config["plugins"][4]
        assert git_plugin[0] == "@semantic-release/git"
        assert git_plugin[1]["message"].startswith("chore(release): ${nextRelease.version} [skip ci]")

    def test_workflow_runs_on_main_with_secrets(self, spec):
        workflow = _entries(spec)[".github/workflows/release.yml"]
        assert "branches:\n      - main" in workflow
        assert "${{ secrets.P_GITHUB_TOKEN }}" in workflow
        assert "${{ secrets.NPM_TOKEN }}" in workflow
        assert workflow.index("npm run prettier:check") < workflow.index("npm run lint") < workflow.index("npm test")

    def test_tsconfig_is_strict(self, spec):
        tsconfig = _entries(spec)["tsconfig.json"]
        assert '"strict": true' in tsconfig
        assert '"outDir": "./lib"' in tsconfig
