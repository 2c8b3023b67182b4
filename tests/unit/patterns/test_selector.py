"""Unit tests for include/exclude path selection."""

from pathlib import Path

import pytest
from jarpack.patterns.glob import CompiledPattern, PatternSyntaxError, compile_pattern
from jarpack.patterns.selector import (
    INCLUDES_ALL,
    PathSelector,
    directory_matcher,
    directory_patterns,
    effective_excludes,
    normalize_patterns,
    simplify,
)

BASE = Path("/project/classes")


class TestNormalizePatterns:
    """Tests for normalize_patterns function."""

    def test_any_depth_prefix(self) -> None:
        """Leading **/ matches with and without parent directories."""
        assert normalize_patterns(["**/*.class"], excludes=False) == ("glob:{**/,}*.class",)

    def test_trailing_slash(self) -> None:
        """A trailing slash selects the whole directory content."""
        assert normalize_patterns(["org/"], excludes=False) == ("glob:org/**",)

    def test_collapses_repeated_double_stars(self) -> None:
        """Consecutive ** segments are merged."""
        assert normalize_patterns(["a/**/**/b"], excludes=False) == ("glob:a/{**/,}b",)
        assert normalize_patterns(["**/**/x"], excludes=False) == ("glob:{**/,}x",)

    def test_escapes_user_brackets_and_braces(self) -> None:
        """Brackets and braces in bare patterns are literals."""
        assert normalize_patterns(["foo[1]{a}"], excludes=False) == ("glob:foo\\[1\\]\\{a\\}",)

    def test_namespaced_patterns_unchanged(self) -> None:
        """Patterns with a syntax prefix are used verbatim."""
        patterns = ["glob:*.x", "regex:.*\\.y"]
        assert normalize_patterns(patterns, excludes=False) == tuple(patterns)

    def test_drops_empty_and_duplicates(self) -> None:
        """None, empty and repeated patterns are dropped, first occurrence kept."""
        result = normalize_patterns([None, "", "**/*.class", "b/", "**/*.class"], excludes=False)
        assert result == ("glob:{**/,}*.class", "glob:b/**")

    def test_match_all_include(self) -> None:
        """A ** include means that everything is included."""
        assert normalize_patterns(["org/**", "**/**"], excludes=False) == ()

    def test_match_all_exclude(self) -> None:
        """A ** exclude replaces every other exclude."""
        assert normalize_patterns(["org/**", "**"], excludes=True) == ("glob:**",)


class TestEffectiveExcludes:
    """Tests for exclude pruning."""

    def test_drops_exclude_with_other_suffix(self) -> None:
        """An exclude for another file extension cannot match."""
        includes = normalize_patterns(["**/*.class"], excludes=False)
        excludes = normalize_patterns(["**/package.html"], excludes=True)
        assert effective_excludes(excludes, includes) == ()

    def test_keeps_overlapping_exclude(self) -> None:
        """An exclude which may match included files is kept."""
        includes = normalize_patterns(["org/**"], excludes=False)
        excludes = normalize_patterns(["org/internal/**"], excludes=True)
        assert effective_excludes(excludes, includes) == excludes

    def test_drops_exclude_with_other_prefix(self) -> None:
        """An exclude under another directory cannot match."""
        includes = normalize_patterns(["org/**"], excludes=False)
        excludes = normalize_patterns(["com/**"], excludes=True)
        assert effective_excludes(excludes, includes) == ()

    def test_non_glob_include_disables_pruning(self) -> None:
        """Regular expression includes are not analyzed."""
        includes = ("regex:.*\\.class",)
        excludes = normalize_patterns(["**/package.html"], excludes=True)
        assert effective_excludes(excludes, includes) == excludes

    def test_pruned_excludes_never_change_the_result(self) -> None:
        """Removing the pruned excludes does not change which paths are accepted."""
        includes = ["**/*.class"]
        excludes = ["**/package.html", "**/*Test.class", "com/**"]
        selector = PathSelector(BASE, includes, excludes)
        all_includes = [compile_pattern(p) for p in normalize_patterns(includes, excludes=False)]
        all_excludes = [compile_pattern(p) for p in normalize_patterns(excludes, excludes=True)]
        for name in [
            "org/Foo.class",
            "org/FooTest.class",
            "org/package.html",
            "com/Bar.class",
            "META-INF/MANIFEST.MF",
            "META-INF/package.html",
        ]:
            expected = any(p(name) for p in all_includes) and not any(
                p(name) for p in all_excludes
            )
            assert selector.matches(BASE / name) == expected, name


class TestPathSelector:
    """Tests for PathSelector class."""

    def test_no_patterns_accepts_everything(self) -> None:
        """Without includes nor excludes every path is accepted."""
        assert PathSelector.of(BASE, [], []) is INCLUDES_ALL
        selector = PathSelector(BASE, None, None)
        assert selector.matches(BASE / "any/file.txt")
        assert selector.matches("relative.txt")

    def test_class_files_only(self) -> None:
        """Only class files are accepted by a **/*.class include."""
        matcher = PathSelector.of(BASE, ["**/*.class"], None)
        assert matcher("a/B.class")
        assert not matcher("a/readme.txt")
        assert matcher(BASE / "a/B.class")

    def test_include_and_exclude(self) -> None:
        """Excluded paths are rejected even when included."""
        matcher = PathSelector.of(BASE, ["org/**"], ["org/internal/**"])
        assert isinstance(matcher, PathSelector)
        assert matcher(BASE / "org/api/Foo.class")
        assert not matcher(BASE / "org/internal/Foo.class")
        assert not matcher(BASE / "com/Foo.class")

    def test_exclude_everything(self) -> None:
        """A ** exclude rejects every path."""
        matcher = PathSelector.of(BASE, None, ["**"])
        assert not matcher(BASE / "Foo.class")

    def test_invalid_pattern(self) -> None:
        """Invalid patterns are reported when the selector is created."""
        with pytest.raises(PatternSyntaxError):
            PathSelector.of(BASE, ["glob:{a,{b}}"], None)

    def test_none_directory_rejected(self) -> None:
        """The base directory is mandatory."""
        with pytest.raises(TypeError):
            PathSelector(None, None, None)  # type: ignore[arg-type]

    def test_str(self) -> None:
        """The string form lists the normalized patterns."""
        selector = PathSelector(BASE, ["org/**"], ["org/internal/**"])
        assert str(selector) == "includes: [glob:org/**], excludes: [glob:org/internal/**]"


class TestSimplify:
    """Tests for matcher simplification."""

    def test_single_include_becomes_pattern(self) -> None:
        """A single any-depth include needs no selector."""
        matcher = PathSelector.of(BASE, ["**/*.class"], ["**/package.html"])
        assert isinstance(matcher, CompiledPattern)

    def test_simplify_is_idempotent(self) -> None:
        """Simplifying a simplified matcher returns it unchanged."""
        for includes, excludes in [
            ([], []),
            (["**/*.class"], []),
            (["org/**"], ["org/internal/**"]),
            (["**/*.class", "**/*.properties"], []),
        ]:
            matcher = PathSelector.of(BASE, includes, excludes)
            assert simplify(matcher) is matcher

    def test_relativized_pattern_not_simplified(self) -> None:
        """Patterns depending on parent directories keep the selector."""
        matcher = PathSelector.of(BASE, ["org/*.class"], None)
        assert isinstance(matcher, PathSelector)
        assert matcher(BASE / "org/Foo.class")
        assert not matcher(BASE / "com/org/Foo.class")


class TestDirectoryFiltering:
    """Tests for directory selection."""

    def test_directory_patterns_for_includes(self) -> None:
        """Include patterns accept the ancestors of their literal prefix."""
        includes = normalize_patterns(["org/example/*.class"], excludes=False)
        assert directory_patterns(includes, excludes=False) == (
            "glob:org",
            "glob:org/example",
        )

    def test_directory_patterns_descend(self) -> None:
        """Patterns which may descend further accept all subdirectories."""
        includes = normalize_patterns(["org/**"], excludes=False)
        assert directory_patterns(includes, excludes=False) == ("glob:org", "glob:org/**")

    def test_non_literal_first_segment(self) -> None:
        """Includes matching at any depth disable directory filtering."""
        includes = normalize_patterns(["**/*.class"], excludes=False)
        assert directory_patterns(includes, excludes=False) == ()

    def test_directory_patterns_for_excludes(self) -> None:
        """Excludes of whole directories reject those directories."""
        excludes = normalize_patterns(["org/internal/**", "**/*.txt"], excludes=True)
        assert directory_patterns(excludes, excludes=True) == ("glob:org/internal",)

    def test_could_hold_selected(self) -> None:
        """Directories outside the includes or fully excluded are not visited."""
        selector = PathSelector(BASE, ["org/**"], ["org/internal/**"])
        assert selector.can_filter_directories()
        assert selector.could_hold_selected(BASE)
        assert selector.could_hold_selected(BASE / "org")
        assert selector.could_hold_selected(BASE / "org/api")
        assert not selector.could_hold_selected(BASE / "org/internal")
        assert not selector.could_hold_selected(BASE / "com")

    def test_directory_matcher(self) -> None:
        """The directory matcher accepts all directories when filtering is impossible."""
        assert directory_matcher(PathSelector.of(BASE, ["**/*.class"], None)) is INCLUDES_ALL
        selector = PathSelector(BASE, ["org/**"], None)
        assert directory_matcher(selector) == selector.could_hold_selected
