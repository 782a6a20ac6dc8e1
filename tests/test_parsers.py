"""Tests for manifest and lockfile parsers."""

import pytest
from pathlib import Path

from hof_scanner.compromised.registry import parse_compromised_list
from hof_scanner.core.parsers import RawFinding, registry as parser_registry
from hof_scanner.core.parsers.nodejs import NodeJSPackageParser, NodeJSYarnParser, specifier_name
from hof_scanner.core.versions import normalize_spec_to_candidates


@pytest.fixture
def registry():
    """Registry with a handful of compromised versions."""
    return parse_compromised_list(
        "left-pad: 1.0.1\n"
        "evil-pkg: 2.0.0\n"
        "pkg: 1.2.3\n"
        "multi: 1.0.0\n"
        "multi: 2.0.0\n"
        "@scope/bad: 3.1.4\n"
    )


@pytest.fixture
def manifest_path(tmp_path):
    return tmp_path / "package.json"


@pytest.fixture
def lock_path(tmp_path):
    return tmp_path / "yarn.lock"


class TestVersionNormalizer:
    """Test reduction of declared specs to literal versions."""

    def test_exact_version(self):
        assert normalize_spec_to_candidates("1.2.3") == ["1.2.3"]

    @pytest.mark.parametrize("spec", ["^1.2.3", "~1.2.3", ">=1.2.3", "<=1.2.3", "=1.2.3", "v1.2.3", "^v1.2.3", ">= 1.2.3"])
    def test_strips_range_prefixes(self, spec):
        assert normalize_spec_to_candidates(spec) == ["1.2.3"]

    def test_alternation_yields_one_candidate_per_part(self):
        assert normalize_spec_to_candidates("^1.0.0 || ~2.0.0 || ") == ["1.0.0", "2.0.0"]

    def test_npm_alias_yields_aliased_version_only(self):
        assert normalize_spec_to_candidates("npm:safe-pkg@2.0.0") == ["2.0.0"]

    def test_compound_range_is_not_resolved(self):
        assert normalize_spec_to_candidates(">=1.2.0 <2.0.0") == ["1.2.0 <2.0.0"]

    @pytest.mark.parametrize("spec", [None, "", 42, ["1.0.0"], {"version": "1.0.0"}])
    def test_non_string_or_empty_input(self, spec):
        assert normalize_spec_to_candidates(spec) == []

    def test_only_operators_yields_nothing(self):
        assert normalize_spec_to_candidates("^") == []


class TestNodeJSPackageParser:
    """Test package.json parsing."""

    def test_can_parse_package_json(self, manifest_path):
        parser = NodeJSPackageParser()
        assert parser.can_parse(manifest_path)
        assert not parser.can_parse(manifest_path.with_name("package-lock.json"))

    def test_caret_spec_matches_exact_version(self, registry, manifest_path):
        content = '{"dependencies": {"pkg": "^1.2.3"}}'
        findings = NodeJSPackageParser().parse(content, manifest_path, registry)

        assert findings == [
            RawFinding(
                file=manifest_path,
                name="pkg",
                version="1.2.3",
                source="package.json",
                section="dependencies",
            )
        ]

    def test_npm_alias_matches_declared_name(self, registry, manifest_path):
        content = '{"dependencies": {"evil-pkg": "npm:safe-pkg@2.0.0"}}'
        findings = NodeJSPackageParser().parse(content, manifest_path, registry)

        assert len(findings) == 1
        assert findings[0].name == "evil-pkg"
        assert findings[0].version == "2.0.0"
        assert findings[0].spec == "evil-pkg@2.0.0"

    def test_alias_target_is_not_looked_up(self, registry, manifest_path):
        content = '{"dependencies": {"harmless": "npm:evil-pkg@2.0.0"}}'
        assert NodeJSPackageParser().parse(content, manifest_path, registry) == []

    def test_alternation_can_yield_multiple_findings(self, registry, manifest_path):
        content = '{"dependencies": {"multi": "1.0.0 || 2.0.0 || 3.0.0"}}'
        findings = NodeJSPackageParser().parse(content, manifest_path, registry)

        assert [f.version for f in findings] == ["1.0.0", "2.0.0"]

    def test_all_sections_are_tagged(self, registry, manifest_path):
        content = '''{
            "dependencies": {"pkg": "1.2.3"},
            "devDependencies": {"left-pad": "1.0.1"},
            "peerDependencies": {"evil-pkg": "2.0.0"},
            "optionalDependencies": {"@scope/bad": "3.1.4"},
            "bundledDependencies": {"multi": "1.0.0"}
        }'''
        findings = NodeJSPackageParser().parse(content, manifest_path, registry)

        assert [(f.name, f.section) for f in findings] == [
            ("pkg", "dependencies"),
            ("left-pad", "devDependencies"),
            ("evil-pkg", "peerDependencies"),
            ("@scope/bad", "optionalDependencies"),
        ]
        assert all(f.source == "package.json" for f in findings)

    def test_non_matching_versions_are_ignored(self, registry, manifest_path):
        content = '{"dependencies": {"pkg": "^1.2.4", "left-pad": ">=1.0.0 <2.0.0", "unknown": "1.0.1"}}'
        assert NodeJSPackageParser().parse(content, manifest_path, registry) == []

    @pytest.mark.parametrize("content", ["{not json", "", "[1, 2, 3]", "null", '"text"'])
    def test_malformed_manifest_yields_no_findings(self, registry, manifest_path, content):
        assert NodeJSPackageParser().parse(content, manifest_path, registry) == []

    def test_deeply_nested_manifest_yields_no_findings(self, registry, manifest_path):
        depth = 100000
        content = '{"dependencies": {"pkg": "1.2.3"}, "x": ' + "[" * depth + "]" * depth + "}"

        assert NodeJSPackageParser().parse(content, manifest_path, registry) == []

    def test_non_object_sections_are_skipped(self, registry, manifest_path):
        content = '{"dependencies": ["pkg"], "devDependencies": "pkg@1.2.3", "peerDependencies": {"pkg": 123}}'
        assert NodeJSPackageParser().parse(content, manifest_path, registry) == []


class TestNodeJSYarnParser:
    """Test yarn.lock (classic v1) parsing."""

    def test_can_parse_yarn_lock(self, lock_path):
        assert NodeJSYarnParser().can_parse(lock_path)

    def test_resolved_version_produces_finding(self, registry, lock_path):
        content = (
            "# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.\n"
            "# yarn lockfile v1\n"
            "\n"
            "\n"
            "left-pad@^1.0.0:\n"
            '  version "1.0.1"\n'
            '  resolved "https://registry.yarnpkg.com/left-pad/-/left-pad-1.0.1.tgz"\n'
            "  integrity sha512-abc\n"
        )
        findings = NodeJSYarnParser().parse(content, lock_path, registry)

        assert findings == [
            RawFinding(file=lock_path, name="left-pad", version="1.0.1", source="yarn.lock")
        ]
        assert findings[0].section is None

    def test_declared_range_in_header_is_not_matched(self, registry, lock_path):
        content = (
            "left-pad@1.0.1:\n"
            '  version "1.0.2"\n'
        )
        assert NodeJSYarnParser().parse(content, lock_path, registry) == []

    def test_multiple_specifiers_share_resolved_version(self, registry, lock_path):
        content = (
            '"multi@^1.0.0", multi@~1.0.0:\n'
            '  version "1.0.0"\n'
        )
        findings = NodeJSYarnParser().parse(content, lock_path, registry)

        # Both specifiers resolve to the same pair; deduplication happens later
        assert [(f.name, f.version) for f in findings] == [("multi", "1.0.0"), ("multi", "1.0.0")]

    def test_scoped_package_header(self, registry, lock_path):
        content = (
            '"@scope/bad@^3.0.0":\n'
            '  version "3.1.4"\n'
        )
        findings = NodeJSYarnParser().parse(content, lock_path, registry)

        assert [f.name for f in findings] == ["@scope/bad"]

    def test_blank_line_ends_block(self, registry, lock_path):
        content = (
            "left-pad@^1.0.0:\n"
            '  version "1.0.0"\n'
            "\n"
            '  version "1.0.1"\n'
        )
        assert NodeJSYarnParser().parse(content, lock_path, registry) == []

    def test_bare_name_range_header(self, registry, lock_path):
        content = (
            "left-pad:^1.0.0\n"
            '  version "1.0.1"\n'
        )
        findings = NodeJSYarnParser().parse(content, lock_path, registry)

        assert [(f.name, f.version) for f in findings] == [("left-pad", "1.0.1")]

    def test_version_without_header_is_ignored(self, registry, lock_path):
        assert NodeJSYarnParser().parse('version "1.0.1"\n', lock_path, registry) == []

    def test_crlf_line_endings(self, registry, lock_path):
        content = 'pkg@^1.2.0:\r\n  version "1.2.3"\r\n\r\nleft-pad@^1.0.0:\r\n  version "1.0.1"\r\n'
        findings = NodeJSYarnParser().parse(content, lock_path, registry)

        assert [f.spec for f in findings] == ["pkg@1.2.3", "left-pad@1.0.1"]

    def test_multiple_blocks_in_file_order(self, registry, lock_path):
        content = (
            "pkg@^1.2.0:\n"
            '  version "1.2.3"\n'
            "  dependencies:\n"
            '    left-pad "^1.0.0"\n'
            "\n"
            "left-pad@^1.0.0:\n"
            '  version "1.0.1"\n'
            "\n"
            "safe@^1.0.0:\n"
            '  version "1.0.1"\n'
        )
        findings = NodeJSYarnParser().parse(content, lock_path, registry)

        assert [f.spec for f in findings] == ["pkg@1.2.3", "left-pad@1.0.1"]


class TestSpecifierName:
    """Test the name/range split used by lockfile headers."""

    @pytest.mark.parametrize("specifier,expected", [
        ("lodash@^4.17.0", "lodash"),
        ('"lodash@^4.17.0"', "lodash"),
        ("'lodash@^4.17.0'", "lodash"),
        ("@babel/core@7.0.0", "@babel/core"),
        ("@babel/core", "@babel/core"),
        ("lodash", "lodash"),
        ("alias@npm:real@1.0.0", "alias@npm:real"),
    ])
    def test_specifier_name(self, specifier, expected):
        assert specifier_name(specifier) == expected


class TestParserRegistry:
    """Test the parser registry system."""

    def test_get_registered_parsers(self):
        assert isinstance(parser_registry.get_parser("nodejs", "package"), NodeJSPackageParser)
        assert isinstance(parser_registry.get_parser("nodejs", "yarn"), NodeJSYarnParser)
        assert parser_registry.get_parser("python", "requirements") is None

    def test_find_parser_for_file(self):
        assert isinstance(parser_registry.find_parser_for_file(Path("a/package.json")), NodeJSPackageParser)
        assert isinstance(parser_registry.find_parser_for_file(Path("a/yarn.lock")), NodeJSYarnParser)
        assert parser_registry.find_parser_for_file(Path("a/package-lock.json")) is None

    def test_supported_names(self):
        assert parser_registry.get_supported_ecosystems() == ["nodejs"]
        assert parser_registry.get_supported_parser_types() == ["package", "yarn"]
        assert parser_registry.get_supported_file_names() == ["package.json", "yarn.lock"]

    def test_parse_content_dispatches_by_basename(self, registry, tmp_path):
        findings = parser_registry.parse_content(
            tmp_path / "yarn.lock", 'left-pad@^1.0.0:\n  version "1.0.1"\n', registry
        )
        assert [f.source for f in findings] == ["yarn.lock"]

        assert parser_registry.parse_content(tmp_path / "README.md", "left-pad: 1.0.1", registry) == []


class TestRawFinding:
    """Test the finding model."""

    def test_to_dict_with_section(self, tmp_path):
        finding = RawFinding(
            file=tmp_path / "app" / "package.json",
            name="pkg",
            version="1.2.3",
            source="package.json",
            section="devDependencies",
        )

        assert finding.to_dict(tmp_path) == {
            "package": "pkg",
            "version": "1.2.3",
            "file": str(tmp_path / "app" / "package.json"),
            "fileRelative": str(Path("app") / "package.json"),
            "source": "package.json",
            "spec": "pkg@1.2.3",
            "section": "devDependencies",
        }

    def test_to_dict_without_section(self, tmp_path):
        finding = RawFinding(file=tmp_path / "yarn.lock", name="pkg", version="1.2.3", source="yarn.lock")
        assert "section" not in finding.to_dict(tmp_path)

    def test_validation(self, tmp_path):
        with pytest.raises(ValueError, match="name cannot be empty"):
            RawFinding(file=tmp_path, name="", version="1.0.0", source="yarn.lock")

    def test_findings_are_immutable(self, tmp_path):
        finding = RawFinding(file=tmp_path, name="pkg", version="1.0.0", source="yarn.lock")
        with pytest.raises(AttributeError):
            finding.version = "2.0.0"
