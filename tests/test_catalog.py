"""
Tests for template catalog lookup.
"""

import pytest

from pmake.catalog import CatalogError, DEFAULT_WILDCARDS, ProjectSettings, TemplateCatalog

from tests.infrastructure import create_info_yaml, write


class TestTemplateCatalog:

    def test_missing_root(self, tmp_path):
        with pytest.raises(CatalogError, match="Did you install the program properly"):
            TemplateCatalog(tmp_path / "nope")

    def test_languages_exclude_reserved_and_hidden(self, templates):
        (templates / ".git").mkdir()
        catalog = TemplateCatalog(templates)
        assert catalog.languages() == ["c++"]
        assert catalog.features() == ["imgui", "tests"]

    def test_unknown_language(self, templates):
        with pytest.raises(CatalogError, match=r'The language "rust" .*Available languages: \[c\+\+\]'):
            TemplateCatalog(templates).resolve_language("rust")

    def test_standards(self, templates):
        catalog = TemplateCatalog(templates)
        assert catalog.standards("c++") == ["23", "20", "17"]
        assert catalog.resolve_standard("c++", "latest") == "23"
        assert catalog.resolve_standard("c++", "17") == "17"

    def test_unknown_standard(self, templates):
        with pytest.raises(CatalogError, match=r"Available standards: \[23,20,17\]"):
            TemplateCatalog(templates).resolve_standard("c++", "98")

    def test_numeric_standards_are_strings(self, tmp_path):
        root = tmp_path / "t"
        create_info_yaml(root / "c", {"standards": [23, 17, 11]})
        assert TemplateCatalog(root).standards("c") == ["23", "17", "11"]

    def test_language_without_standards(self, tmp_path):
        root = tmp_path / "t"
        (root / "go" / "executable" / "console").mkdir(parents=True)
        with pytest.raises(CatalogError, match="doesn't have standards"):
            TemplateCatalog(root).resolve_standard("go", "latest")

    def test_kinds_and_modes(self, templates):
        catalog = TemplateCatalog(templates)
        assert catalog.kinds("c++") == ["executable", "library"]
        assert catalog.modes("c++", "library") == ["header-only", "static"]

    def test_default_mode_from_info(self, templates):
        """Настроенный режим важнее первого каталога по алфавиту."""
        catalog = TemplateCatalog(templates)
        assert catalog.default_mode("c++", "library") == "static"
        assert catalog.default_mode("c++", "executable") == "console"

    def test_resolve_kind(self, templates):
        catalog = TemplateCatalog(templates)
        assert catalog.resolve_kind("c++", "library") == ("library", "static")
        assert catalog.resolve_kind("c++", "library", "header-only") == ("library", "header-only")

    def test_unknown_kind(self, templates):
        with pytest.raises(CatalogError, match=r"Available kinds: \[executable,library\]"):
            TemplateCatalog(templates).resolve_kind("c++", "plugin")

    def test_unknown_mode(self, templates):
        with pytest.raises(CatalogError, match=r'The mode "static" for the kind "executable"'):
            TemplateCatalog(templates).resolve_kind("c++", "executable", "static")

    def test_features(self, templates):
        catalog = TemplateCatalog(templates)
        assert catalog.resolve_features(["tests", "imgui", "tests"]) == ("tests", "imgui")
        assert catalog.feature_path("imgui") == templates / "features" / "imgui"

    def test_unknown_feature(self, templates):
        with pytest.raises(CatalogError, match=r'The feature "vulkan" doesn\'t exist'):
            TemplateCatalog(templates).resolve_features(["vulkan"])

    def test_resolve(self, templates):
        settings = TemplateCatalog(templates).resolve("demo", language="c++", kind="library", features=["tests"])
        assert settings == ProjectSettings(
            name="demo", language="c++", standard="23", kind="library", mode="static", features=("tests",),
        )

    def test_template_path(self, templates):
        catalog = TemplateCatalog(templates)
        settings = catalog.resolve("demo", language="c++", kind="executable")
        assert catalog.template_path(settings) == templates / "c++" / "executable" / "console"

    def test_wildcards_and_binary(self, templates):
        catalog = TemplateCatalog(templates)
        assert catalog.wildcards() == DEFAULT_WILDCARDS
        assert catalog.binary_patterns() == ["*.png"]

    def test_wildcards_default_and_override(self, tmp_path):
        root = tmp_path / "t"
        create_info_yaml(root, {"wildcards": {"project_name": "@NAME@"}})
        wildcards = TemplateCatalog(root).wildcards()
        assert wildcards["project_name"] == "@NAME@"
        assert wildcards["project_language"] == "!LANGUAGE!"

    def test_missing_info_file(self, tmp_path):
        root = tmp_path / "t"
        root.mkdir()
        catalog = TemplateCatalog(root)
        assert catalog.wildcards() == DEFAULT_WILDCARDS
        assert catalog.binary_patterns() == []

    def test_broken_yaml(self, tmp_path):
        root = tmp_path / "t"
        write(root / "pmake-info.yaml", "wildcards: [unclosed\n")
        with pytest.raises(CatalogError, match="Couldn't parse"):
            TemplateCatalog(root)

    def test_yaml_must_be_mapping(self, tmp_path):
        root = tmp_path / "t"
        write(root / "pmake-info.yaml", "- a\n- b\n")
        with pytest.raises(CatalogError, match="must be a mapping"):
            TemplateCatalog(root)

    def test_common_path(self, templates, tmp_path):
        assert TemplateCatalog(templates).common_path() == templates / "common"

        root = tmp_path / "t"
        root.mkdir()
        assert TemplateCatalog(root).common_path() is None

    def test_required_features(self, templates):
        catalog = TemplateCatalog(templates)
        assert catalog.required_features("c++", "executable", "gui") == ("imgui",)
        assert catalog.required_features("c++", "executable", "console") == ()
        assert catalog.required_features("c++", "library", "static") == ()

    def test_required_features_must_be_mapping(self, tmp_path):
        root = tmp_path / "t"
        create_info_yaml(root / "c++", {"required_features": ["imgui"]})
        with pytest.raises(CatalogError, match="'required_features' must be a mapping"):
            TemplateCatalog(root).required_features("c++", "executable", "gui")

    def test_resolve_uses_required_features(self, templates):
        catalog = TemplateCatalog(templates)

        assert catalog.resolve("demo", language="c++", kind="executable", mode="gui").features == ("imgui",)
        # явный список, даже пустой, заменяет обязательные фичи
        assert catalog.resolve("demo", language="c++", kind="executable", mode="gui", features=[]).features == ()
        assert catalog.resolve(
            "demo", language="c++", kind="executable", mode="gui", features=["tests"],
        ).features == ("tests",)
